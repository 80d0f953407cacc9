"""Live search provider calling Spoonacular ``complexSearch``."""

import logging
from typing import Any, Dict

from recipes_buddy.data_layer.exceptions import UpstreamError
from recipes_buddy.data_layer.models import RecipeSearchResult, SearchCriteria
from recipes_buddy.ingestion.spoonacular_http import SpoonacularHttp
from recipes_buddy.providers.search_provider import RecipeSearchProvider

logger = logging.getLogger(__name__)

SEARCH_PATH = "/recipes/complexSearch"


class LiveSearchProvider(RecipeSearchProvider):
    """Provider that forwards searches to the Spoonacular API.

    Every call consumes API quota. Retry and timeout handling live in
    :class:`SpoonacularHttp`.
    """

    mode = "live"

    def __init__(self, http: SpoonacularHttp) -> None:
        self._http = http

    @staticmethod
    def build_params(criteria: SearchCriteria) -> Dict[str, Any]:
        """Translate *criteria* into ``complexSearch`` query parameters.

        Optional filters are only present when set; numeric filters must
        also be strictly positive.
        """
        params: Dict[str, Any] = {
            "query": criteria.query,
            "number": criteria.size,
            "offset": criteria.offset,
            "addRecipeInformation": "false",
            "addRecipeNutrition": "true",
            "fillIngredients": "false",
        }
        params.update(criteria.active_filters())
        return params

    def search(self, criteria: SearchCriteria) -> RecipeSearchResult:
        logger.info("Recipe search forwarded to Spoonacular (API quota will be consumed)")
        payload = self._http.get_json(
            SEARCH_PATH, self.build_params(criteria), operation="search recipes"
        )
        if not isinstance(payload, dict):
            raise UpstreamError("Failed to parse recipe search response", 502, operation="search recipes")
        try:
            return RecipeSearchResult.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(
                "Failed to parse recipe search response", 502, operation="search recipes"
            ) from e
