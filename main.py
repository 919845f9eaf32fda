from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database.connection import init_db
from repositories.track_repository import ensure_indexes
from tracks.routes import router as tracks_router

# =====================================================
# * Global logging configuration
# =====================================================
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger("main")

# =====================================================
# * Database check on startup
# =====================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.db_ready = init_db()
    if app.state.db_ready:
        ensure_indexes()
    logger.info(f"🌍 {settings.PROJECT_NAME} backend started in '{settings.ENV}' mode.")
    yield

# =====================================================
# * Application
# =====================================================
app = FastAPI(
    title=f"{settings.PROJECT_NAME} Backend",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =====================================================
# * Errors -> {"success": false, "error": ...}
# =====================================================
def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", []) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    logger.warning(f"⚠️ Invalid request on {request.url.path}: {message}")
    return error_response(400, message)

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.url.path}")
    if request.url.path.startswith("/api"):
        return error_response(500, str(exc) or "Server error")
    return HTMLResponse("<h1>Server error</h1>", status_code=500)

# =====================================================
# * Routes
# =====================================================
app.include_router(tracks_router, prefix="/api", tags=["Tracks"])

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

logger.info("📜 Routers registered:")
logger.info(" - /api -> TracksRouter")
logger.info(f" - {settings.UPLOAD_URL_PREFIX} -> uploaded files ({settings.UPLOAD_DIR})")

@app.get("/", summary="Backend root")
def root():
    return {
        "message": f"🚀 {settings.PROJECT_NAME} backend is up",
        "version": settings.VERSION,
        "env": settings.ENV
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
