import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inworld_token.models.settings import get_settings
from inworld_token.routers.token import router as token_router
from inworld_token.services.token_service import init_token_service

load_dotenv()

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(message)s",
)

app = FastAPI(title="Inworld Token Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(token_router)

logger = logging.getLogger("main")


@app.on_event("startup")
async def startup_event() -> None:
    if not settings.has_credentials:
        logger.warning("INWORLD_KEY/INWORLD_SECRET not set; token endpoint will be unavailable")
        return

    token_service = init_token_service(settings)
    logger.info(
        "Token service ready (endpoint=%s, workspace=%s)",
        token_service.endpoint,
        token_service.workspace,
    )


@app.get("/health")
async def health() -> dict:
    return {
        "status": "Healthy",
        "credentials_configured": settings.has_credentials,
    }


@app.get("/ready")
async def ready() -> dict:
    return {
        "status": "Ready",
    }
