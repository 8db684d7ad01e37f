"""
Search API client.

Issues keyword queries against a paid web search endpoint and returns
the raw JSON hit list.
"""
import logging
import requests
from typing import Any, Dict, List, Optional

from morning_report.models import DEFAULT_SEARCH_API_URL, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


class SearchAPIError(Exception):
    """Base exception for search API errors."""

    def __init__(self, message: str, status_code: int = None, response_body: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class SearchAuthenticationError(SearchAPIError):
    """Raised when the API key is rejected (401 Unauthorized)."""
    pass


class SearchForbiddenError(SearchAPIError):
    """Raised when access is forbidden (403 Forbidden)."""
    pass


class SearchRateLimitError(SearchAPIError):
    """Raised when rate limit is exceeded (429 Too Many Requests)."""
    pass


class SearchClient:
    """
    Client for the search API.

    Handles:
    - Bearer token authentication
    - Query requests with a result-count hint
    - Mapping HTTP failures to SearchAPIError subclasses
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_SEARCH_API_URL,
        timeout: float = 15,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize search client.

        Args:
            api_key: Search API key
            api_url: Search endpoint URL
            timeout: Request timeout in seconds
            user_agent: Custom User-Agent string

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            raise ValueError("API key cannot be empty")

        self.api_url = api_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers['Authorization'] = f'Bearer {api_key}'
        self.session.headers['Content-Type'] = 'application/json'
        self.session.headers['User-Agent'] = user_agent or DEFAULT_USER_AGENT

    def search(self, query: str, top_k: int = 5) -> List[Dict[str, Any]]:
        """
        Run one search query.

        Args:
            query: Query string
            top_k: Maximum number of results requested

        Returns:
            List of hit objects (title, url, published_at); hits that are
            not JSON objects are passed through for the caller to discard

        Raises:
            SearchAPIError: On non-success status or undecodable response
            requests.RequestException: On network errors and timeouts
        """
        logger.info(f"Searching: {query!r} (top_k={top_k})")
        response = self.session.post(
            self.api_url,
            json={"query": query, "top_k": top_k},
            timeout=self.timeout,
        )

        if not response.ok:
            logger.warning(f"Search failed ({response.status_code}) for query {query!r}")
            self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise SearchAPIError(
                f"Invalid response from search API: {e}",
                status_code=response.status_code,
                response_body=response.text,
            )

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            logger.debug(f"No results list in search response for {query!r}")
            return []
        return results

    def _raise_for_status(self, response: requests.Response) -> None:
        """
        Raise specific exceptions based on HTTP status code.

        Raises:
            SearchAuthenticationError: For 401 Unauthorized
            SearchForbiddenError: For 403 Forbidden
            SearchRateLimitError: For 429 Too Many Requests
            SearchAPIError: For other 4xx/5xx errors
        """
        status_code = response.status_code
        error_body = response.text

        if status_code == 401:
            raise SearchAuthenticationError(
                f"Authentication failed: {error_body}",
                status_code=status_code,
                response_body=error_body
            )
        elif status_code == 403:
            raise SearchForbiddenError(
                f"Access forbidden: {error_body}",
                status_code=status_code,
                response_body=error_body
            )
        elif status_code == 429:
            raise SearchRateLimitError(
                f"Rate limit exceeded: {error_body}",
                status_code=status_code,
                response_body=error_body
            )
        else:
            raise SearchAPIError(
                f"Search request failed ({status_code}): {error_body}",
                status_code=status_code,
                response_body=error_body
            )
