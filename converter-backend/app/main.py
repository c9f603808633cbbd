from fastapi import FastAPI
from app.routes import router as convert_router
from app.cache import build_cache_from_env
from app.config import load_settings
from app.logging_setup import configure_logging, logging_middleware
import asyncio
import logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="SP1 Converter")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.middleware("http")(logging_middleware)
    app.include_router(convert_router)
    app.state.settings = load_settings()

    # Initialize cache synchronously
    try:
        loop = asyncio.get_event_loop()
    except RuntimeError:  # pragma: no cover
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    try:
        app.state.cache = loop.run_until_complete(build_cache_from_env())
    except Exception as e:  # pragma: no cover
        logger.warning("Cache initialisation failed (%s); running without cache", e)
    return app

app = create_app()
