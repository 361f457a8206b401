import logging

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..config import Settings

logger = logging.getLogger(__name__)


class ClientManager:
    """
    Owns the one MongoClient shared by every request.
    The client is never replaced after construction; pymongo pools and
    synchronizes connections internally.
    """

    def __init__(self, client: MongoClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientManager":
        client = MongoClient(
            settings.mongo_uri,
            appname=settings.mongo_app_name,
            minPoolSize=settings.mongo_min_pool_size,
            maxPoolSize=settings.mongo_max_pool_size,
        )
        logger.info(
            "MongoDB client created (pool %d..%d, app %r)",
            settings.mongo_min_pool_size,
            settings.mongo_max_pool_size,
            settings.mongo_app_name,
        )
        return cls(client)

    @property
    def client(self) -> MongoClient:
        return self._client

    def collection(self, database: str, collection: str) -> Collection:
        return self._client[database][collection]

    def ping(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False

    def close(self) -> None:
        self._client.close()
