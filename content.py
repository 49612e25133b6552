"""Mood-keyed content: YouTube music search and motivational quotes."""

from typing import Any, Dict, List, Optional

import requests
import structlog

from config import Settings
from errors import InvalidInput, ProviderError

logger = structlog.get_logger()

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
QUOTABLE_URL = "https://api.quotable.io/quotes"
SONGS_PER_PAGE = 5
QUOTES_PER_CALL = 3

MOOD_KEYWORDS = {
    "happy": "inspirational",
    "sad": "life",
    "angry": "anger",
    "relaxed": "peace",
}
DEFAULT_KEYWORD = "motivational"

STATIC_QUOTES: Dict[str, List[Dict[str, str]]] = {
    "happy": [
        {"id": "happy-1", "content": "Happiness is not something ready made. It comes from your own actions.", "author": "Dalai Lama"},
        {"id": "happy-2", "content": "Folks are usually about as happy as they make their minds up to be.", "author": "Abraham Lincoln"},
        {"id": "happy-3", "content": "The most wasted of all days is one without laughter.", "author": "E. E. Cummings"},
    ],
    "sad": [
        {"id": "sad-1", "content": "Tears come from the heart and not from the brain.", "author": "Leonardo da Vinci"},
        {"id": "sad-2", "content": "Every man has his secret sorrows which the world knows not.", "author": "Henry Wadsworth Longfellow"},
        {"id": "sad-3", "content": "The word 'happy' would lose its meaning if it were not balanced by sadness.", "author": "Carl Jung"},
    ],
    "angry": [
        {"id": "angry-1", "content": "For every minute you remain angry, you give up sixty seconds of peace of mind.", "author": "Ralph Waldo Emerson"},
        {"id": "angry-2", "content": "Speak when you are angry and you will make the best speech you will ever regret.", "author": "Ambrose Bierce"},
    ],
    "relaxed": [
        {"id": "relaxed-1", "content": "Peace comes from within. Do not seek it without.", "author": "Buddha"},
        {"id": "relaxed-2", "content": "Nothing can bring you peace but yourself.", "author": "Ralph Waldo Emerson"},
        {"id": "relaxed-3", "content": "Almost everything will work again if you unplug it for a few minutes, including you.", "author": "Anne Lamott"},
    ],
}


class SongSearch:
    def __init__(self, api_key: Optional[str], timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, mood: Optional[str], page_token: Optional[str] = None) -> Dict[str, Any]:
        """Up to five videos for "<mood> music", relayed as YouTube returns them."""
        if not mood:
            raise InvalidInput("Mood is required")
        params = {
            "part": "snippet",
            "type": "video",
            "q": f"{mood} music",
            "key": self.api_key,
            "maxResults": SONGS_PER_PAGE,
        }
        if page_token:
            params["pageToken"] = page_token

        try:
            resp = self.session.get(YOUTUBE_SEARCH_URL, params=params, timeout=self.timeout)
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("songs.fetch_failed", mood=mood, error=str(e))
            raise ProviderError("Failed to fetch songs", error=str(e)) from e

        if isinstance(data, dict) and data.get("error"):
            logger.error("songs.provider_error", mood=mood, error=data["error"])
            raise ProviderError("YouTube API error", error=data["error"])
        return data


class QuoteSource:
    """Quotes for a mood label; subclasses decide where they come from."""

    def quotes_for(self, mood: Optional[str]) -> List[Dict[str, str]]:
        if not mood:
            raise InvalidInput("Mood is required")
        return self._lookup(mood.lower())

    def _lookup(self, mood: str) -> List[Dict[str, str]]:
        raise NotImplementedError


class RemoteQuoteSource(QuoteSource):
    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def _lookup(self, mood: str) -> List[Dict[str, str]]:
        keyword = MOOD_KEYWORDS.get(mood, DEFAULT_KEYWORD)
        try:
            resp = self.session.get(
                QUOTABLE_URL,
                params={"tags": keyword, "limit": QUOTES_PER_CALL},
                timeout=self.timeout,
            )
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("quotes.fetch_failed", mood=mood, keyword=keyword, error=str(e))
            raise ProviderError("Failed to fetch quotes") from e

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            raise ProviderError("No quotes found", status_code=404)
        if not isinstance(results, list) or not all(isinstance(q, dict) for q in results):
            logger.error("quotes.unexpected_payload", mood=mood, keyword=keyword, payload_type=type(results).__name__)
            raise ProviderError("Failed to fetch quotes")
        return [_normalise_quote(q) for q in results]


def _normalise_quote(q: Dict[str, Any]) -> Dict[str, str]:
    # quotable ids are "_id"; null fields become empty strings
    quote_id = q.get("_id") or q.get("id") or ""
    return {
        "id": str(quote_id),
        "content": str(q.get("content") or ""),
        "author": str(q.get("author") or ""),
    }


class StaticQuoteSource(QuoteSource):
    def __init__(self, table: Optional[Dict[str, List[Dict[str, str]]]] = None):
        self.table = STATIC_QUOTES if table is None else table

    def _lookup(self, mood: str) -> List[Dict[str, str]]:
        return [dict(q) for q in self.table.get(mood, [])]


def build_quote_source(settings: Settings) -> QuoteSource:
    if settings.quote_source == "static":
        return StaticQuoteSource()
    return RemoteQuoteSource(timeout=settings.http_timeout)
