import logging
import sys

import uvicorn
from pydantic import ValidationError
from pymongo.errors import ConfigurationError

from .config import get_settings
from .main import create_app, load_env
from .observability import setup_logging
from .services.mongo import ClientManager

logger = logging.getLogger("gateway")


def main() -> None:
    load_env()
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical(f"Invalid configuration (is MONGO_URI set?): {e}")
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_format)
    logger.info("Connecting to MongoDB")
    try:
        manager = ClientManager.from_settings(settings)
    except (ConfigurationError, ValueError, TypeError) as e:
        logger.critical(f"Could not create MongoDB client: {e}")
        sys.exit(1)

    logger.info(f"Starting server on {settings.host}:{settings.port}")
    try:
        uvicorn.run(create_app(manager, settings), host=settings.host, port=settings.port)
    finally:
        manager.close()


if __name__ == "__main__":
    main()
