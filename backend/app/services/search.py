import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from app.config import settings
from app.models.search_model import Candidate, EnrichedTrack, SearchQuery, SongInfo
from app.services.soundcloud import SoundCloudClient

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN = "Unknown"
MISSING_URL_MESSAGE = "Track has no URL, details could not be fetched"


class DetailLookupFailure(Exception):
    pass


class UpstreamSearchFailure(Exception):
    pass


@dataclass
class LookupOutcome:
    """Result of one detail lookup: either ``info`` or ``error`` is set."""
    candidate: Candidate
    info: Optional[SongInfo] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.info is not None


class SearchService:
    def __init__(
        self,
        client: SoundCloudClient,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
        detail_timeout: Optional[float] = None,
    ):
        self.client = client
        self.default_limit = default_limit or settings.DEFAULT_LIMIT
        self.max_limit = max_limit or settings.MAX_LIMIT
        self.detail_timeout = detail_timeout or settings.DETAIL_TIMEOUT_SECONDS
        if self.default_limit < 1 or self.max_limit < 1:
            raise ValueError("Search limits must be at least 1")

        logger.info(
            f"SearchService initialized (default_limit={self.default_limit}, "
            f"max_limit={self.max_limit}, detail_timeout={self.detail_timeout}s)"
        )

    async def search(self, query: SearchQuery) -> list[EnrichedTrack]:
        try:
            candidates = await self.client.search(query.text, "track", query.limit)
        except Exception as e:
            raise UpstreamSearchFailure(f"Search for '{query.text}' failed: {str(e)}") from e

        if not candidates:
            logger.info(f"No candidates for '{query.text}'")
            return []

        # Every task resolves to an outcome, so gather never short-circuits
        outcomes = await asyncio.gather(*(self._lookup(c) for c in candidates))
        results = [build_track(outcome) for outcome in outcomes]

        failed = sum(1 for track in results if track.fetchError)
        logger.info(f"Enriched {len(results)} tracks for '{query.text}' ({failed} degraded)")
        return results

    async def _lookup(self, candidate: Candidate) -> LookupOutcome:
        if not candidate.url:
            return LookupOutcome(candidate=candidate, error=MISSING_URL_MESSAGE)
        try:
            info = await self._fetch_details(candidate.url)
        except DetailLookupFailure as e:
            logger.warning(f"Detail lookup failed for {candidate.url}: {str(e)}")
            return LookupOutcome(candidate=candidate, error=str(e))
        return LookupOutcome(candidate=candidate, info=info)

    async def _fetch_details(self, url: str) -> SongInfo:
        try:
            return await asyncio.wait_for(self.client.get_song_info(url), timeout=self.detail_timeout)
        except asyncio.TimeoutError as e:
            raise DetailLookupFailure(f"Detail lookup timed out after {self.detail_timeout:g}s") from e
        except Exception as e:
            raise DetailLookupFailure(str(e) or e.__class__.__name__) from e


def duration_to_seconds(duration_ms: Optional[int]) -> int:
    if not duration_ms or duration_ms < 0:
        return 0
    return int(duration_ms // 1000)


def build_track(outcome: LookupOutcome) -> EnrichedTrack:
    candidate = outcome.candidate

    if outcome.ok:
        info = outcome.info
        author = info.author.name if info.author else None
        return EnrichedTrack(
            title=info.title or UNKNOWN_TITLE,
            url=info.url or candidate.url,
            author=author or UNKNOWN_ARTIST,
            thumbnail=info.thumbnail or None,
            duration_seconds=duration_to_seconds(info.duration),
            genre=info.genre or UNKNOWN,
            publishedAt=info.publishedAt or UNKNOWN,
        )

    return EnrichedTrack(
        title=candidate.title or UNKNOWN_TITLE,
        url=candidate.url,
        author=candidate.author or UNKNOWN_ARTIST,
        thumbnail=candidate.thumbnail or None,
        duration_seconds=duration_to_seconds(candidate.duration),
        genre=UNKNOWN,
        publishedAt=UNKNOWN,
        fetchError=True,
        errorMessage=outcome.error,
    )
