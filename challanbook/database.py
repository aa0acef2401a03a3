from typing import Union

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from config import settings
from challanbook.enums import Collection
from challanbook.logger import logger


class Database:
    client: AsyncIOMotorClient = None
    database: AsyncIOMotorDatabase = None

db = Database()

async def get_database():
    return db.database

async def connect_to_mongo():
    db.client = AsyncIOMotorClient(settings.MONGODB_URL, serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS)
    db.database = db.client[settings.DATABASE_NAME]
    logger.info(f"Connected to MongoDB: {settings.DATABASE_NAME}")

async def ping_database():
    """Round-trip to the server; raises if it cannot be reached."""
    database = await get_database()
    await database.command("ping")

async def close_mongo_connection():
    if db.client:
        db.client.close()
        db.client = None
        db.database = None
        logger.info("Disconnected from MongoDB")

# Collection helpers
async def get_collection(collection: Union[Collection, str]):
    database = await get_database()
    name = collection.value if isinstance(collection, Collection) else collection
    return database[name]
