"""Canned (JSON-backed) search provider.

Serves every search from a static Spoonacular ``complexSearch`` payload
bundled with the package, so development and tests consume no API quota.
The criteria are ignored; the same page is returned for every query.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from recipes_buddy.config import DEFAULT_STATIC_SEARCH_PATH
from recipes_buddy.data_layer.exceptions import UpstreamError
from recipes_buddy.data_layer.models import RecipeSearchResult, SearchCriteria
from recipes_buddy.providers.search_provider import RecipeSearchProvider

logger = logging.getLogger(__name__)


class CannedSearchProvider(RecipeSearchProvider):
    """Provider backed by a static JSON search response.

    The file is parsed lazily on the first search and kept in memory.
    """

    mode = "mock"

    def __init__(self, json_path: Union[str, Path, None] = None) -> None:
        self.json_path = Path(json_path) if json_path else DEFAULT_STATIC_SEARCH_PATH
        self._result: Optional[RecipeSearchResult] = None

    def search(self, criteria: SearchCriteria) -> RecipeSearchResult:
        """Return the canned result regardless of *criteria*."""
        if self._result is None:
            self._result = self._load()
        logger.info(
            f"Recipe search served from canned data (no API quota consumed): "
            f"query={criteria.query!r}, {self._result.total_results} results"
        )
        return self._result

    def _load(self) -> RecipeSearchResult:
        try:
            with open(self.json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read static search JSON '{self.json_path}': {e}")
            raise UpstreamError(
                f"Failed to read static search data: {self.json_path.name}",
                500,
                operation="search recipes",
            ) from e

        try:
            return RecipeSearchResult.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(
                "Failed to parse static search data", 500, operation="search recipes"
            ) from e
