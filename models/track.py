# backend/models/track.py
from pydantic import BaseModel, Field
from typing import List, Optional

class Comment(BaseModel):
    id: Optional[str] = None
    text: str
    author: str
    likes: int = 0
    created_at: Optional[str] = None

class CommentCreate(BaseModel):
    """JSON body of POST /api/tracks/{id}/comments."""
    text: Optional[str] = None
    author: Optional[str] = None

class Track(BaseModel):
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    artist: str = Field(..., min_length=1)
    audio_url: str = Field(..., min_length=1)
    cover_url: Optional[str] = None
    likes: int = 0
    comments: List[Comment] = []
    created_at: Optional[str] = None
