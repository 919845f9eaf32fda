# backend/repositories/track_repository.py
from database.connection import music_db
from models.track import Track
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError
from datetime import datetime, timezone
from typing import List, Dict, Optional
import logging
import re

logger = logging.getLogger("repositories.tracks")

# ============================================================
# 🗂️ Tracks collection
# ============================================================
TRACKS_COLLECTION = music_db["tracks"]

# ============================================================
# 🔹 Indexes (called once the server answered the startup ping)
# ============================================================
def ensure_indexes() -> bool:
    """Index for newest-first listing. Returns False if it could not be created."""
    try:
        TRACKS_COLLECTION.create_index([("created_at", DESCENDING)])
        return True
    except PyMongoError as e:
        logger.warning(f"⚠️ Could not create index 'created_at': {e}")
        return False

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def _to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        logger.warning(f"⚠️ Invalid ObjectId: {value}")
        return None

# ============================================================
# 🔹 Track serializer
# ============================================================
def serialize_comment(doc: dict) -> Dict:
    comment = dict(doc)
    comment["id"] = str(comment.pop("_id", "")) or None
    return comment

def serialize_track(doc: dict) -> Optional[Dict]:
    """Converts a Mongo document into a JSON serializable dict."""
    if not doc:
        return None
    track = dict(doc)
    track["id"] = str(track.get("_id"))
    track.pop("_id", None)
    track["comments"] = [serialize_comment(c) for c in track.get("comments") or []]
    return track

# ============================================================
# 🔹 Create track
# ============================================================
def create_track(title: str, artist: str, audio_url: str, cover_url: Optional[str] = None) -> Dict:
    """
    Persists a new track and returns it serialized.
    Raises pydantic.ValidationError when title, artist or audio_url is empty.
    """
    track = Track(
        title=title,
        artist=artist,
        audio_url=audio_url,
        cover_url=cover_url,
        created_at=_now(),
    )
    doc = track.model_dump(exclude={"id"})
    result = TRACKS_COLLECTION.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info(f"✅ Track created with ID {result.inserted_id}: {artist} - {title}")
    return serialize_track(doc)

# ============================================================
# 🔹 List tracks (newest first)
# ============================================================
def get_all_tracks() -> List[Dict]:
    cursor = TRACKS_COLLECTION.find().sort("created_at", DESCENDING)
    return [serialize_track(doc) for doc in cursor]

# ============================================================
# 🔹 Get track by ID
# ============================================================
def get_track_by_id(track_id: str) -> Optional[Dict]:
    """Gets a track by its ObjectId (as string)."""
    obj_id = _to_object_id(track_id)
    if obj_id is None:
        return None
    doc = TRACKS_COLLECTION.find_one({"_id": obj_id})
    return serialize_track(doc)

# ============================================================
# 🔹 Search by title / artist substring
# ============================================================
def search_tracks(query: str) -> List[Dict]:
    """Case-insensitive literal substring match on title OR artist."""
    pattern = re.escape(query.strip())
    cursor = TRACKS_COLLECTION.find({
        "$or": [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"artist": {"$regex": pattern, "$options": "i"}},
        ]
    }).sort("created_at", DESCENDING)
    results = [serialize_track(doc) for doc in cursor]
    logger.info(f"🔎 Search '{query}' -> {len(results)} results")
    return results

# ============================================================
# 🔹 Likes
# ============================================================
def like_track(track_id: str) -> Optional[Dict]:
    obj_id = _to_object_id(track_id)
    if obj_id is None:
        return None
    doc = TRACKS_COLLECTION.find_one_and_update(
        {"_id": obj_id},
        {"$inc": {"likes": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if doc:
        logger.info(f"❤️ Track {track_id} liked ({doc.get('likes')})")
    return serialize_track(doc)

def like_comment(track_id: str, comment_id: str) -> Optional[Dict]:
    """Increments one embedded comment's likes. None if track or comment is unknown."""
    obj_id = _to_object_id(track_id)
    comment_obj_id = _to_object_id(comment_id)
    if obj_id is None or comment_obj_id is None:
        return None
    doc = TRACKS_COLLECTION.find_one_and_update(
        {"_id": obj_id, "comments._id": comment_obj_id},
        {"$inc": {"comments.$.likes": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if doc:
        logger.info(f"❤️ Comment {comment_id} on track {track_id} liked")
    return serialize_track(doc)

# ============================================================
# 🔹 Comments
# ============================================================
def add_comment(track_id: str, text: str, author: str) -> Optional[Dict]:
    """Appends a comment at the end of the track's list."""
    obj_id = _to_object_id(track_id)
    if obj_id is None:
        return None
    comment = {
        "_id": ObjectId(),
        "text": text,
        "author": author,
        "likes": 0,
        "created_at": _now(),
    }
    doc = TRACKS_COLLECTION.find_one_and_update(
        {"_id": obj_id},
        {"$push": {"comments": comment}},
        return_document=ReturnDocument.AFTER,
    )
    if doc:
        logger.info(f"💬 Comment {comment['_id']} added to track {track_id} by {author}")
    return serialize_track(doc)
