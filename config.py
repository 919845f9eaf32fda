# backend/config.py
import os
from dotenv import load_dotenv
from pathlib import Path

# ============================================================
# 🌍 DETECT ENVIRONMENT AND LOAD MATCHING .env
# ============================================================
ENV = os.getenv("ENV", "development")

env_file = ".env.production" if ENV == "production" else ".env.development"
dotenv_path = Path(__file__).resolve().parent / env_file
load_dotenv(dotenv_path)


def _build_mongo_uri() -> str:
    """Full URI wins; otherwise compose one from the MONGO_* parts."""
    uri = os.getenv("MONGODB_URI")
    if uri:
        return uri
    user = os.getenv("MONGO_USER")
    password = os.getenv("MONGO_PASSWORD")
    host = os.getenv("MONGO_HOST", "localhost")
    port = os.getenv("MONGO_PORT", "27017")
    if user and password:
        return f"mongodb://{user}:{password}@{host}:{port}"
    return f"mongodb://{host}:{port}"


# ============================================================
# ⚙️ GENERAL SETTINGS
# ============================================================
class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "SoundShare")
    VERSION: str = os.getenv("VERSION", "1.0")

    # 🔹 Mongo (tracks catalog)
    MONGO_URI: str = _build_mongo_uri()
    MONGO_DB: str = os.getenv("MONGO_DB", "music-platform")
    MONGO_TIMEOUT_MS: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

    # 🔹 Uploaded files
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "public/uploads")
    UPLOAD_URL_PREFIX: str = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
    MAX_UPLOAD_SIZE: int = int(os.getenv("MAX_UPLOAD_SIZE", str(25 * 1024 * 1024)))

    # 🔹 Comments
    DEFAULT_COMMENT_AUTHOR: str = os.getenv("DEFAULT_COMMENT_AUTHOR", "Anonymous")

    # 🔹 Others
    ALLOWED_ORIGINS: list = os.getenv("ALLOWED_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = ENV == "development"
    ENV: str = ENV

settings = Settings()
