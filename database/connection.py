# backend/database/connection.py
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from config import settings

logger = logging.getLogger("database")

# ============================================================
# 🎵 MUSIC DATABASE CONNECTION
# ============================================================
def get_music_db():
    """Creates the client and returns the catalog database handle.

    MongoClient connects lazily, so this never blocks on an unreachable server.
    """
    try:
        client = MongoClient(settings.MONGO_URI, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)
        db = client[settings.MONGO_DB]
        logger.info(f"✅ Music database handle ready: {settings.MONGO_DB}")
        return db
    except Exception as e:
        logger.error(f"❌ Error creating MongoDB client: {e}")
        raise e

# ============================================================
# 🧩 GLOBAL INSTANCE
# ============================================================
music_db = get_music_db()

# ============================================================
# 🚀 DATABASE INITIALIZATION
# ============================================================
def init_db():
    """Pings the server once at startup. Returns True if it answered."""
    try:
        music_db.client.admin.command("ping")
        logger.info(f"✅ Connected to MongoDB database '{settings.MONGO_DB}'.")
        return True
    except PyMongoError as e:
        logger.error(f"❌ MongoDB is not reachable: {e}")
        return False
