import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from .config import Settings, get_settings
from .error_handlers import register_error_handlers
from .routers import command, health
from .services.commands import CommandDispatcher
from .services.mongo import ClientManager

logger = logging.getLogger(__name__)

# Load env from backend/.env.local if exists
_env_path = Path(__file__).resolve().parent.parent / ".env.local"


def load_env() -> None:
    if _env_path.exists():
        load_dotenv(_env_path)


def create_app(manager: Optional[ClientManager] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the gateway app.
    With an injected manager the app neither creates nor closes the client.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = manager is None
        mongo = manager
        if owned:
            mongo = ClientManager.from_settings(settings or get_settings())
        app.state.mongo = mongo
        app.state.dispatcher = CommandDispatcher(mongo)
        logger.info("Mongo command gateway started")
        try:
            yield
        finally:
            if owned:
                mongo.close()
            logger.info("Mongo command gateway shutting down")

    app = FastAPI(title="Mongo Command Gateway", version="0.1.0", lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(command.router)
    app.include_router(health.router)
    return app
