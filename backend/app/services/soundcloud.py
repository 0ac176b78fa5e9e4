import logging
import re
from typing import Any, Optional
from urllib.parse import urljoin

import httpx

from app.config import settings
from app.models.search_model import Candidate, SongAuthor, SongInfo

logger = logging.getLogger(__name__)

SCRIPT_SRC_RE = re.compile(r'<script[^>]*\ssrc="([^"]+\.js)"')
CLIENT_ID_RE = re.compile(r'client_id\s*[:=]\s*"(\w{32})"')

SEARCH_PATHS = {
    "track": "/search/tracks",
    "playlist": "/search/playlists",
    "user": "/search/users",
    "artist": "/search/users",
    "all": "/search",
}


class ScraperError(Exception):
    pass


class SoundCloudClient:
    """Unofficial client for the public SoundCloud web API.

    Uses the same anonymous client_id the SoundCloud web player ships in its
    JavaScript bundle. The id is discovered on first use unless one is
    configured, then reused for the lifetime of the client.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        client_id: Optional[str] = None,
        api_base: Optional[str] = None,
        web_url: Optional[str] = None,
    ) -> None:
        self.http = http_client
        self.api_base = (api_base or settings.SOUNDCLOUD_API_BASE).rstrip("/")
        self.web_url = web_url or settings.SOUNDCLOUD_WEB_URL
        self._client_id = client_id or None

    @property
    def has_client_id(self) -> bool:
        return self._client_id is not None

    async def get_client_id(self) -> str:
        if self._client_id is None:
            self._client_id = await self._discover_client_id()
        return self._client_id

    async def _discover_client_id(self) -> str:
        page = await self._fetch_text(self.web_url)
        scripts = SCRIPT_SRC_RE.findall(page)
        logger.info(f"Looking for a client_id in {len(scripts)} scripts")

        # The app bundle carrying the id is loaded last
        for src in reversed(scripts):
            script_url = urljoin(self.web_url, src)
            try:
                source = await self._fetch_text(script_url)
            except ScraperError as e:
                logger.debug(f"Skipping script {script_url}: {str(e)}")
                continue
            match = CLIENT_ID_RE.search(source)
            if match:
                logger.info(f"Discovered SoundCloud client_id from {script_url}")
                return match.group(1)

        raise ScraperError("Could not find a SoundCloud client_id in the web player scripts")

    async def _fetch_text(self, url: str) -> str:
        try:
            response = await self.http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ScraperError(f"HTTP {e.response.status_code} while fetching {url}") from e
        except httpx.HTTPError as e:
            raise ScraperError(f"Request to {url} failed: {str(e) or e.__class__.__name__}") from e
        return response.text

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.api_base}{path}"
        params = {**params, "client_id": await self.get_client_id()}
        try:
            response = await self.http.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise ScraperError(f"SoundCloud returned HTTP {e.response.status_code} for {path}") from e
        except httpx.HTTPError as e:
            raise ScraperError(f"Request to SoundCloud failed: {str(e) or e.__class__.__name__}") from e
        except ValueError as e:
            raise ScraperError(f"SoundCloud returned malformed JSON for {path}") from e

    async def search(self, query: str, kind: str = "track", limit: int = 10) -> list[Candidate]:
        path = SEARCH_PATHS.get(kind)
        if path is None:
            raise ValueError(f"Unknown search kind '{kind}'. Available: {', '.join(SEARCH_PATHS)}")

        data = await self._get_json(path, {"q": query, "limit": limit, "offset": 0})
        collection = data.get("collection") if isinstance(data, dict) else None
        if not isinstance(collection, list):
            raise ScraperError("SoundCloud search response has no collection")

        candidates = [_to_candidate(item) for item in collection[:limit] if isinstance(item, dict)]
        logger.info(f"SoundCloud {kind} search for '{query}' returned {len(candidates)} items")
        return candidates

    async def get_song_info(self, url: str) -> SongInfo:
        data = await self._get_json("/resolve", {"url": url})
        if not isinstance(data, dict) or data.get("kind") != "track":
            raise ScraperError(f"{url} does not resolve to a track")

        user = data.get("user") or {}
        author = None
        if user:
            author = SongAuthor(
                name=user.get("username"),
                username=user.get("permalink"),
                url=user.get("permalink_url"),
            )
        return SongInfo(
            title=data.get("title"),
            url=data.get("permalink_url"),
            author=author,
            thumbnail=data.get("artwork_url") or user.get("avatar_url"),
            duration=data.get("full_duration") or data.get("duration"),
            genre=data.get("genre") or None,
            publishedAt=data.get("display_date") or data.get("created_at"),
        )

    async def close(self) -> None:
        await self.http.aclose()


def _to_candidate(item: dict) -> Candidate:
    user = item.get("user") or {}
    return Candidate(
        url=item.get("permalink_url"),
        title=item.get("title") or item.get("username"),
        author=user.get("username") or item.get("username"),
        thumbnail=item.get("artwork_url") or item.get("avatar_url"),
        duration=item.get("duration"),
    )
