import logging

from contextlib import asynccontextmanager

from src.backend.common.config.app_config import config

# FastAPI imports
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local imports
from src.backend.api.query_router import get_catalog, query_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage FastAPI application lifecycle - startup and shutdown."""
    logger = logging.getLogger(__name__)

    # Startup: the scenario catalog is read once and stays read-only.
    logger.info("🚀 Starting Xero Query Tool...")
    try:
        catalog = get_catalog()
        logger.info(f"✅ {len(catalog)} scenarios available")
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"❌ Could not load scenario catalog: {e}")
        raise
    yield

    logger.info("👋 Xero Query Tool shutdown complete")


# Configure logging levels from environment variables
logging.basicConfig(level=getattr(logging, config.BASIC_LOGGING_LEVEL.upper(), logging.INFO))

# Request-level chatter from the HTTP stack is not useful at INFO.
logging.getLogger("urllib3").setLevel(logging.WARNING)

# Initialize the FastAPI app
app = FastAPI(title="Xero Query Tool", lifespan=lifespan)

frontend_url = config.FRONTEND_SITE_NAME

app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_url] if frontend_url != "*" else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(query_router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


# Run the app
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.backend.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info",
        access_log=False,
    )
