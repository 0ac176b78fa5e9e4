"""Pytest configuration and fixtures.

HTTP tests run against app.main:app through ASGITransport. The lifespan is
not started, so the search service is injected with dependency overrides
backed by FakeSoundCloudClient instead of the real scraper.
"""

import asyncio
from typing import Optional, Union

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.routes import get_search_service
from app.main import app
from app.models.search_model import Candidate, SongAuthor, SongInfo
from app.services.search import SearchService


class FakeSoundCloudClient:
    """Stands in for SoundCloudClient, recording every call."""

    def __init__(
        self,
        candidates: Optional[list[Candidate]] = None,
        details: Optional[dict[str, Union[SongInfo, Exception]]] = None,
        delays: Optional[dict[str, float]] = None,
        search_error: Optional[Exception] = None,
    ):
        self.candidates = candidates or []
        self.details = details or {}
        self.delays = delays or {}
        self.search_error = search_error
        self.search_calls: list[tuple[str, str, int]] = []
        self.detail_calls: list[str] = []

    async def search(self, query: str, kind: str = "track", limit: int = 10) -> list[Candidate]:
        self.search_calls.append((query, kind, limit))
        if self.search_error is not None:
            raise self.search_error
        return self.candidates[:limit]

    async def get_song_info(self, url: str) -> SongInfo:
        self.detail_calls.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        detail = self.details.get(url)
        if isinstance(detail, Exception):
            raise detail
        if detail is None:
            return song_info(url)
        return detail


def candidate(n: int, **overrides) -> Candidate:
    data = {
        "url": f"https://soundcloud.com/artist-{n}/track-{n}",
        "title": f"Track {n}",
        "author": f"Artist {n}",
        "thumbnail": f"https://i1.sndcdn.com/artworks-{n}-large.jpg",
        "duration": 180_000 + n,
    }
    data.update(overrides)
    return Candidate(**data)


def song_info(track_url: str, **overrides) -> SongInfo:
    data = {
        "title": f"Details for {track_url.rsplit('/', 1)[-1]}",
        "url": track_url,
        "author": SongAuthor(name="Detail Artist"),
        "thumbnail": "https://i1.sndcdn.com/artworks-detail-t500x500.jpg",
        "duration": 215_999,
        "genre": "Lo-fi",
        "publishedAt": "2024-03-01T12:00:00Z",
    }
    data.update(overrides)
    return SongInfo(**data)


@pytest.fixture
def fake_client() -> FakeSoundCloudClient:
    return FakeSoundCloudClient(candidates=[candidate(i) for i in range(1, 4)])


@pytest.fixture
def search_service(fake_client: FakeSoundCloudClient) -> SearchService:
    return SearchService(client=fake_client, default_limit=10, max_limit=50, detail_timeout=1.0)


@pytest.fixture
async def client(search_service: SearchService) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app.dependency_overrides[get_search_service] = lambda: search_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_candidate():
    return candidate


@pytest.fixture
def make_song_info():
    return song_info
