import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import cart_router
from config import settings
from errors import register_exception_handlers

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("cart-api")

app = FastAPI(title="Cart API")

if settings.allowed_origins == ["*"]:
    allow_origins = ["*"]
else:
    allow_origins = settings.allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(cart_router)


@app.on_event("startup")
async def _on_startup() -> None:
    if allow_origins == ["*"]:
        logger.warning(
            "CORS is set to allow all origins with credentials; set ALLOWED_ORIGINS to explicit values for local dev."
        )


@app.get("/api/diag/health")
async def health():
    return {"status": "ok"}
