from typing import Any, Optional
import logging
import re

logger = logging.getLogger(__name__)

# Leading integer, the rest of the string is ignored ("12abc" -> 12, "2.5" -> 2)
LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


class BadRequest(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def validate_query(q: Any) -> str:
    """Return the trimmed query text or raise BadRequest."""
    if not isinstance(q, str) or not q.strip():
        raise BadRequest('Missing search query. Please provide a "q" parameter.')
    return q.strip()


def parse_requested_limit(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    match = LEADING_INT_RE.match(str(raw))
    if match is None:
        logger.debug(f"Ignoring non-numeric limit: {raw!r}")
        return None
    return int(match.group(1))


def normalize_limit(requested: Optional[int], default: int, maximum: int) -> int:
    if requested is None or requested <= 0:
        return min(default, maximum)
    if requested > maximum:
        logger.info(f"Clamping limit {requested} to {maximum}")
        return maximum
    return requested
