# backend/tracks/routes.py
from fastapi import APIRouter, HTTPException, File, Form, Query, UploadFile
from typing import Optional
from models.track import CommentCreate
from tracks.controllers import (
    upload_track,
    list_tracks,
    fetch_track,
    search_catalog,
    like_track_controller,
    add_comment_controller,
    like_comment_controller,
)
import logging

router = APIRouter()
LOG = logging.getLogger("tracks.routes")

# ============================================================
# 🔹 Upload track
# ============================================================
@router.post("/tracks", status_code=201, summary="Upload a new track")
def upload_track_route(
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    audio: Optional[UploadFile] = File(None),
    cover: Optional[UploadFile] = File(None),
):
    """
    multipart/form-data with:
    - title, artist: text fields (required)
    - audio: .mp3 / .wav / .ogg / .mpeg (required)
    - cover: .jpeg / .jpg / .png / .gif (optional)
    """
    LOG.info(f"🎵 Upload request -> {artist} - {title}")
    try:
        return upload_track(title, artist, audio, cover)
    except HTTPException as e:
        raise e
    except Exception as e:
        LOG.exception("❌ Error uploading track")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 🔹 List tracks
# ============================================================
@router.get("/tracks", summary="List all tracks, newest first")
def list_tracks_route():
    try:
        return list_tracks()
    except Exception as e:
        LOG.exception("❌ Error listing tracks")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 🔹 Get track by ID
# ============================================================
@router.get("/tracks/{track_id}", summary="Get track by ID")
def get_track_route(track_id: str):
    try:
        return fetch_track(track_id)
    except HTTPException as e:
        raise e
    except Exception as e:
        LOG.exception(f"❌ Error fetching track {track_id}")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 🔹 Search
# ============================================================
@router.get("/search", summary="Search tracks by title or artist")
def search_route(q: Optional[str] = Query(None, description="Text to look for")):
    LOG.info(f"🔎 Search request: {q}")
    try:
        return search_catalog(q)
    except HTTPException as e:
        raise e
    except Exception as e:
        LOG.exception("❌ Error searching tracks")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 🔹 Like track
# ============================================================
@router.post("/tracks/{track_id}/like", summary="Like a track")
def like_track_route(track_id: str):
    try:
        return like_track_controller(track_id)
    except HTTPException as e:
        raise e
    except Exception as e:
        LOG.exception(f"❌ Error liking track {track_id}")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 🔹 Comments
# ============================================================
@router.post("/tracks/{track_id}/comments", summary="Add a comment to a track")
def add_comment_route(track_id: str, payload: CommentCreate):
    try:
        return add_comment_controller(track_id, payload)
    except HTTPException as e:
        raise e
    except Exception as e:
        LOG.exception(f"❌ Error commenting on track {track_id}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/tracks/{track_id}/comments/{comment_id}/like", summary="Like a comment")
def like_comment_route(track_id: str, comment_id: str):
    try:
        return like_comment_controller(track_id, comment_id)
    except HTTPException as e:
        raise e
    except Exception as e:
        LOG.exception(f"❌ Error liking comment {comment_id} on track {track_id}")
        raise HTTPException(status_code=500, detail=str(e))
