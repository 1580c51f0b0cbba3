from pymongo import MongoClient
from pymongo.errors import ConnectionFailure
import logging
from .config import get_db_config

logger = logging.getLogger(__name__)

def get_mongodb_client() -> MongoClient:
    """Get a MongoDB client and verify the server is reachable."""
    db_config = get_db_config()
    uri = db_config.get("uri")

    try:
        client = MongoClient(
            uri,
            maxPoolSize=50,
            minPoolSize=5,
            maxIdleTimeMS=30000,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=10000,
            socketTimeoutMS=20000,
        )
        client.admin.command('ping')
        logger.info(f"Successfully connected to MongoDB database {db_config['database']}")
        return client
    except ConnectionFailure as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise
