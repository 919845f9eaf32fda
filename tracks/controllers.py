# backend/tracks/controllers.py
from fastapi import HTTPException, UploadFile
from pydantic import ValidationError
from typing import Optional

from config import settings
from models.track import CommentCreate
from repositories.track_repository import (
    create_track,
    get_all_tracks,
    get_track_by_id,
    search_tracks,
    like_track,
    add_comment,
    like_comment,
)
from tracks.uploads import UploadRejected, save_upload, remove_files
import logging

logger = logging.getLogger("tracks.controllers")

TRACK_NOT_FOUND = "Track not found"

# ============================================================
# 🔹 Upload a track (audio + optional cover)
# ============================================================
def upload_track(
    title: Optional[str],
    artist: Optional[str],
    audio: Optional[UploadFile],
    cover: Optional[UploadFile] = None,
):
    title = (title or "").strip()
    artist = (artist or "").strip()
    if not title or not artist:
        logger.warning("⚠️ Upload rejected: missing title or artist")
        raise HTTPException(status_code=400, detail="Title and artist are required")
    if audio is None or not audio.filename:
        logger.warning("⚠️ Upload rejected: no audio file")
        raise HTTPException(status_code=400, detail="Audio file is required")

    stored = []
    try:
        audio_file = save_upload("audio", audio)
        stored.append(audio_file["path"])

        cover_url = None
        if cover is not None and cover.filename:
            cover_file = save_upload("cover", cover)
            stored.append(cover_file["path"])
            cover_url = cover_file["url"]

        track = create_track(title, artist, audio_file["url"], cover_url)
    except UploadRejected as e:
        remove_files(stored)
        raise HTTPException(status_code=400, detail=str(e))
    except ValidationError as e:
        remove_files(stored)
        raise HTTPException(status_code=400, detail=f"Invalid track data: {e.errors()[0]['msg']}")
    except Exception:
        remove_files(stored)
        raise

    return {"success": True, "track": track}

# ============================================================
# 🔹 Catalog
# ============================================================
def list_tracks():
    tracks = get_all_tracks()
    if not tracks:
        logger.info("📭 The catalog is empty.")
    return {"success": True, "tracks": tracks}

def fetch_track(track_id: str):
    track = get_track_by_id(track_id)
    if not track:
        raise HTTPException(status_code=404, detail=TRACK_NOT_FOUND)
    return {"success": True, "track": track}

def search_catalog(query: Optional[str]):
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail="Search query is empty")
    return {"success": True, "results": search_tracks(query)}

# ============================================================
# 🔹 Likes & comments
# ============================================================
def like_track_controller(track_id: str):
    track = like_track(track_id)
    if not track:
        raise HTTPException(status_code=404, detail=TRACK_NOT_FOUND)
    return {"success": True, "track": track}

def add_comment_controller(track_id: str, payload: CommentCreate):
    text = (payload.text or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Comment text is empty")
    author = (payload.author or "").strip() or settings.DEFAULT_COMMENT_AUTHOR

    track = add_comment(track_id, text, author)
    if not track:
        raise HTTPException(status_code=404, detail=TRACK_NOT_FOUND)
    return {"success": True, "track": track}

def like_comment_controller(track_id: str, comment_id: str):
    track = like_comment(track_id, comment_id)
    if not track:
        raise HTTPException(status_code=404, detail="Track or comment not found")
    return {"success": True, "track": track}
