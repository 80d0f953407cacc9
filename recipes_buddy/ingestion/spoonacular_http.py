"""HTTP transport for the Spoonacular API.

Owns the ``requests`` session, the credential header, per-call timeouts and
the retry policy. Knows nothing about recipes: callers hand it a path and
query parameters and get parsed JSON back.

API Reference: https://spoonacular.com/food-api/docs
"""

import logging
from typing import Any, Dict, Optional

import requests

from recipes_buddy.data_layer.exceptions import (
    ConfigurationError,
    RecipeNotFoundError,
    UpstreamError,
)
from recipes_buddy.ingestion.retry import call_with_retry

logger = logging.getLogger(__name__)


class SpoonacularHttp:
    """Blocking JSON-over-HTTP access to Spoonacular.

    Usage:
        http = SpoonacularHttp(api_key="your_key")
        payload = http.get_json("/recipes/716429/information", {"includeNutrition": "true"})
    """

    DEFAULT_BASE_URL = "https://api.spoonacular.com"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        auth_header: str = "x-api-key",
        session: Optional[requests.Session] = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
        retry_attempts: int = 2,
        retry_delay: float = 1.0,
    ):
        """Initialize the transport.

        Args:
            api_key: Spoonacular API key sent in ``auth_header`` on every call
            base_url: API root
            auth_header: Header name carrying the key
            session: Optional ``requests.Session`` (tests inject a mock here)
            connect_timeout: Connection-establishment timeout in seconds
            read_timeout: Response-read timeout in seconds
            retry_attempts: Extra attempts after a transient failure
            retry_delay: Fixed delay between attempts in seconds
        """
        self._api_key = api_key.strip() if api_key else None
        self.base_url = base_url.rstrip("/")
        self.auth_header = auth_header
        self.session = session or requests.Session()
        self.timeout = (connect_timeout, read_timeout)
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay

    def get_json(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "request",
        not_found_id: Optional[int] = None,
    ) -> Any:
        """GET ``path`` with retries and return the decoded JSON body.

        Args:
            path: Path below ``base_url`` (leading slash)
            params: Query parameters
            operation: Short label used in logs and error context
            not_found_id: When set, a 404 raises RecipeNotFoundError for this ID

        Raises:
            RecipeNotFoundError: On 404 when ``not_found_id`` is given
            UpstreamError: On any other failure, after retries where transient
            ConfigurationError: If no API key is configured
        """
        return call_with_retry(
            self._make_request,
            path,
            params or {},
            operation,
            not_found_id,
            max_retries=self.retry_attempts,
            delay=self.retry_delay,
        )

    def _headers(self) -> Dict[str, str]:
        if not self._api_key:
            raise ConfigurationError(
                "Spoonacular API key not found. "
                "Please set the SPOONACULAR_API_KEY environment variable",
                setting="spoonacular.api_key",
            )
        return {self.auth_header: self._api_key, "Accept": "application/json"}

    def _make_request(
        self,
        path: str,
        params: Dict[str, Any],
        operation: str,
        not_found_id: Optional[int],
    ) -> Any:
        """Make a single API request.

        Raises:
            UpstreamError: ``transient=True`` for timeouts, connection
                failures and 5xx responses
        """
        url = f"{self.base_url}{path}"
        headers = self._headers()
        logger.debug(f"GET {path} params={params}")

        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise UpstreamError(
                f"Spoonacular {operation} timed out", 504, transient=True, operation=operation
            )
        except requests.exceptions.ConnectionError:
            raise UpstreamError(
                f"Failed to connect to Spoonacular during {operation}",
                503,
                transient=True,
                operation=operation,
            )
        except requests.exceptions.RequestException as e:
            raise UpstreamError(
                f"Spoonacular {operation} failed: {e.__class__.__name__}",
                502,
                operation=operation,
            )

        status = response.status_code
        if status == 404 and not_found_id is not None:
            raise RecipeNotFoundError(not_found_id)

        if status >= 500:
            logger.error(f"Spoonacular {operation} error: status={status}, body={response.text[:500]}")
            raise UpstreamError(
                f"Failed to {operation}: Spoonacular returned status {status}",
                status,
                transient=True,
                operation=operation,
            )

        if status >= 400:
            logger.error(f"Spoonacular {operation} error: status={status}, body={response.text[:500]}")
            raise UpstreamError(
                f"Failed to {operation}: Spoonacular returned status {status}",
                status,
                operation=operation,
            )

        try:
            return response.json()
        except ValueError:
            raise UpstreamError(
                f"Failed to parse Spoonacular {operation} response", 502, operation=operation
            )
