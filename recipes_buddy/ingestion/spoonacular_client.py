"""Spoonacular retrieval client.

Translates the three logical operations of the backend (search, recipe
detail, ingredient detail) into Spoonacular calls.

DESIGN DECISIONS:
- Search is delegated to a RecipeSearchProvider chosen once at construction
  (canned data in mock mode, live API otherwise); detail lookups always
  go to the live API
- Retry/timeout policy lives in SpoonacularHttp, orthogonal to the data
  source choice
- A 404 on recipe detail is a RecipeNotFoundError, never a generic
  upstream failure
"""

import logging
from typing import Any, Optional

import requests

from recipes_buddy.config import Settings
from recipes_buddy.data_layer.exceptions import (
    RecipeNotFoundError,
    UpstreamError,
    ValidationFailureError,
)
from recipes_buddy.data_layer.models import (
    Ingredient,
    RecipeDetail,
    RecipeSearchResult,
    SearchCriteria,
)
from recipes_buddy.ingestion.spoonacular_http import SpoonacularHttp
from recipes_buddy.providers.canned_provider import CannedSearchProvider
from recipes_buddy.providers.live_provider import LiveSearchProvider
from recipes_buddy.providers.search_provider import RecipeSearchProvider

logger = logging.getLogger(__name__)

NUTRITION_BOUND_MAX = 5000
DEFAULT_INGREDIENT_UNIT = "serving"


def validate_search_criteria(criteria: SearchCriteria) -> None:
    """Check search constraints before anything is sent upstream.

    Raises:
        ValidationFailureError: On the first violated constraint
    """
    if not criteria.query or not criteria.query.strip():
        raise ValidationFailureError("query", criteria.query, "search query cannot be empty")
    for name, value in (
        ("maxCalories", criteria.max_calories),
        ("maxCarbs", criteria.max_carbs),
        ("minProtein", criteria.min_protein),
        ("maxFat", criteria.max_fat),
    ):
        if value is not None and not 0 <= value <= NUTRITION_BOUND_MAX:
            raise ValidationFailureError(
                name, value, f"must be between 0 and {NUTRITION_BOUND_MAX}"
            )
    if criteria.size < 1:
        raise ValidationFailureError("size", criteria.size, "must be at least 1")
    if criteria.offset < 0:
        raise ValidationFailureError("offset", criteria.offset, "cannot be negative")


class SpoonacularClient:
    """Client for the Spoonacular recipe and ingredient endpoints.

    Usage:
        client = SpoonacularClient.from_settings(load_settings())

        page = client.search_recipes(SearchCriteria(query="pasta"))
        recipe = client.get_recipe_detail(page.results[0].id)
    """

    def __init__(self, http: SpoonacularHttp, search_provider: Optional[RecipeSearchProvider] = None):
        """Initialize the client.

        Args:
            http: Transport used for detail lookups (and live search)
            search_provider: Search data source; defaults to live search over ``http``
        """
        self.http = http
        self.search_provider = search_provider or LiveSearchProvider(http)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session: Optional[requests.Session] = None,
        search_provider: Optional[RecipeSearchProvider] = None,
    ) -> "SpoonacularClient":
        """Build a client from settings.

        ``settings.mock_mode`` selects the canned search provider unless an
        explicit ``search_provider`` is given. Outside mock mode the API key
        is required up front.

        Raises:
            ConfigurationError: If live mode is selected without an API key
        """
        api_key = settings.api_key if settings.mock_mode else settings.require_api_key()
        http = SpoonacularHttp(
            api_key=api_key,
            base_url=settings.base_url,
            auth_header=settings.auth_header,
            session=session,
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
            retry_attempts=settings.retry_attempts,
            retry_delay=settings.retry_delay,
        )
        if search_provider is None and settings.mock_mode:
            search_provider = CannedSearchProvider(settings.static_search_path)
        return cls(http, search_provider)

    @property
    def mock_mode(self) -> bool:
        """True when searches are answered from canned data."""
        return self.search_provider.mode == "mock"

    def search_recipes(self, criteria: SearchCriteria) -> RecipeSearchResult:
        """Search for recipes with optional ingredient and nutrition filters.

        Raises:
            ValidationFailureError: If the criteria violate a constraint
            UpstreamError: If the provider fails after retries
        """
        validate_search_criteria(criteria)
        logger.info(
            f"Searching recipes [mode={self.search_provider.mode}]: query={criteria.query!r}, "
            f"filters={criteria.active_filters()}, number={criteria.size}, offset={criteria.offset}"
        )
        result = self.search_provider.search(criteria)
        logger.info(f"Recipe search successful: found {result.total_results} results")
        return result

    def get_recipe_detail(self, recipe_id: int) -> RecipeDetail:
        """Fetch full recipe information including nutrition.

        The nutrition total is filled from the "Calories" nutrient when the
        provider leaves it unset.

        Raises:
            RecipeNotFoundError: If the provider has no such recipe
            UpstreamError: If the provider fails after retries
        """
        logger.info(f"Fetching recipe details for ID: {recipe_id}")
        payload = self.http.get_json(
            f"/recipes/{recipe_id}/information",
            {"includeNutrition": "true"},
            operation="fetch recipe details",
            not_found_id=recipe_id,
        )
        if not payload:
            raise RecipeNotFoundError(recipe_id)
        recipe = self._parse(RecipeDetail, payload, "recipe details")
        logger.info(f"Recipe details fetched successfully for ID: {recipe_id}")
        return recipe

    def get_ingredient_detail(
        self,
        ingredient_id: int,
        amount: Optional[float] = None,
        unit: Optional[str] = None,
    ) -> Optional[Ingredient]:
        """Fetch nutrition for ``amount`` ``unit`` of an ingredient.

        Args:
            ingredient_id: Spoonacular ingredient ID
            amount: Quantity (defaults to 1.0)
            unit: Unit (defaults to "serving")

        Returns:
            Ingredient with nutrition, or None when the provider returns no body

        Raises:
            UpstreamError: If the provider fails after retries
        """
        amount = 1.0 if amount is None else amount
        unit = unit or DEFAULT_INGREDIENT_UNIT
        logger.info(f"Fetching ingredient information for ID: {ingredient_id}, amount: {amount} {unit}")
        payload = self.http.get_json(
            f"/food/ingredients/{ingredient_id}/information",
            {"amount": f"{amount:.2f}", "unit": unit},
            operation="fetch ingredient information",
        )
        if not payload:
            return None
        return self._parse(Ingredient, payload, "ingredient information")

    @staticmethod
    def _parse(model: Any, payload: Any, label: str) -> Any:
        if not isinstance(payload, dict):
            raise UpstreamError(f"Failed to parse {label} response", 502, operation=label)
        try:
            return model.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Failed to parse {label} response", 502, operation=label) from e
