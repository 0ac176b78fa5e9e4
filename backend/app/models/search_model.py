from typing import Optional
from pydantic import BaseModel, Field


class SearchQuery(BaseModel):
    text: str = Field(..., min_length=1, description="Trimmed search text")
    limit: int = Field(..., ge=1, description="Number of tracks to request upstream")


class Candidate(BaseModel):
    """Track reference returned by the initial search, before enrichment."""
    url: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[int] = Field(None, description="Duration in milliseconds")


class SongAuthor(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None
    url: Optional[str] = None


class SongInfo(BaseModel):
    """Detail payload for a single track."""
    title: Optional[str] = None
    url: Optional[str] = None
    author: Optional[SongAuthor] = None
    thumbnail: Optional[str] = None
    duration: Optional[int] = Field(None, description="Duration in milliseconds")
    genre: Optional[str] = None
    publishedAt: Optional[str] = None


class EnrichedTrack(BaseModel):
    title: str
    url: Optional[str] = None
    author: str
    thumbnail: Optional[str] = None
    duration_seconds: int = Field(0, ge=0)
    genre: str
    publishedAt: str
    fetchError: bool = False
    errorMessage: Optional[str] = None


class SearchResponse(BaseModel):
    query: str
    requested_limit: Optional[int] = Field(None, description="Limit as sent by the caller, if numeric")
    processed_limit: int = Field(..., description="Limit after defaulting and clamping")
    actual_result_count: int
    developer: str
    message: Optional[str] = Field(None, description="Optional message, e.g. when nothing was found")
    results: list[EnrichedTrack]


class RootResponse(BaseModel):
    message: str
    status: str
    developer: str
    usage: str
    warning: str


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
