"""Tests for the Spoonacular retrieval client."""

from unittest.mock import Mock

import pytest

from recipes_buddy.config import Settings
from recipes_buddy.data_layer.exceptions import (
    ConfigurationError,
    RecipeNotFoundError,
    UpstreamError,
    ValidationFailureError,
)
from recipes_buddy.data_layer.models import RecipeSearchResult, SearchCriteria
from recipes_buddy.ingestion.spoonacular_client import (
    SpoonacularClient,
    validate_search_criteria,
)
from recipes_buddy.providers import CannedSearchProvider, LiveSearchProvider


class TestValidateSearchCriteria:
    """Tests for search criteria validation."""

    def test_valid_criteria_pass(self):
        validate_search_criteria(SearchCriteria(query="pasta", max_calories=5000, offset=0))

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_rejected(self, query):
        with pytest.raises(ValidationFailureError) as exc_info:
            validate_search_criteria(SearchCriteria(query=query))
        assert exc_info.value.field == "query"

    def test_bound_above_max_rejected(self):
        with pytest.raises(ValidationFailureError) as exc_info:
            validate_search_criteria(SearchCriteria(query="pasta", max_fat=5001))
        assert exc_info.value.field == "maxFat"

    def test_negative_bound_rejected(self):
        with pytest.raises(ValidationFailureError) as exc_info:
            validate_search_criteria(SearchCriteria(query="pasta", min_protein=-1))
        assert exc_info.value.field == "minProtein"

    def test_size_below_one_rejected(self):
        with pytest.raises(ValidationFailureError):
            validate_search_criteria(SearchCriteria(query="pasta", size=0))

    def test_negative_offset_rejected(self):
        with pytest.raises(ValidationFailureError):
            validate_search_criteria(SearchCriteria(query="pasta", offset=-5))


class TestSpoonacularClient:
    """Tests for SpoonacularClient operations over a mocked transport."""

    @pytest.fixture
    def http(self):
        return Mock()

    @pytest.fixture
    def client(self, http):
        return SpoonacularClient(http)

    def test_default_provider_is_live(self, client):
        assert isinstance(client.search_provider, LiveSearchProvider)
        assert client.mock_mode is False

    def test_search_sends_filters(self, client, http, search_payload):
        http.get_json.return_value = search_payload

        result = client.search_recipes(
            SearchCriteria(query="pasta", exclude_ingredients=("nuts",), max_calories=600, size=5)
        )

        assert isinstance(result, RecipeSearchResult)
        assert result.total_results == 86
        path, params = http.get_json.call_args.args[:2]
        assert path == "/recipes/complexSearch"
        assert params["query"] == "pasta"
        assert params["number"] == 5
        assert params["excludeIngredients"] == "nuts"
        assert params["maxCalories"] == 600

    def test_invalid_search_never_reaches_upstream(self, client, http):
        with pytest.raises(ValidationFailureError):
            client.search_recipes(SearchCriteria(query=""))
        http.get_json.assert_not_called()

    def test_recipe_detail(self, client, http, recipe_payload):
        http.get_json.return_value = recipe_payload

        recipe = client.get_recipe_detail(123)

        assert recipe.title == "Butter Biscuits"
        assert recipe.total_calories == 350.0
        args, kwargs = http.get_json.call_args
        assert args == ("/recipes/123/information", {"includeNutrition": "true"})
        assert kwargs["not_found_id"] == 123

    def test_recipe_detail_derives_calories_from_nutrients(self, client, http, recipe_payload):
        del recipe_payload["nutrition"]["totalCalories"]
        http.get_json.return_value = recipe_payload

        assert client.get_recipe_detail(123).total_calories == 350.0

    def test_recipe_detail_empty_body_is_not_found(self, client, http):
        http.get_json.return_value = None

        with pytest.raises(RecipeNotFoundError):
            client.get_recipe_detail(123)

    def test_recipe_detail_malformed_body_is_upstream_error(self, client, http):
        http.get_json.return_value = {"title": "no id"}

        with pytest.raises(UpstreamError) as exc_info:
            client.get_recipe_detail(123)
        assert exc_info.value.http_status == 502

    def test_ingredient_detail_params(self, client, http, ingredient_payload):
        http.get_json.return_value = ingredient_payload(1, 200.0)

        ingredient = client.get_ingredient_detail(1, 2.5, "cups")

        assert ingredient.nutrition.sum_calories() == 200.0
        args = http.get_json.call_args.args
        assert args == ("/food/ingredients/1/information", {"amount": "2.50", "unit": "cups"})

    def test_ingredient_detail_defaults(self, client, http, ingredient_payload):
        http.get_json.return_value = ingredient_payload(1, 10.0)

        client.get_ingredient_detail(1)

        assert http.get_json.call_args.args[1] == {"amount": "1.00", "unit": "serving"}

    def test_ingredient_detail_empty_body_returns_none(self, client, http):
        http.get_json.return_value = {}

        assert client.get_ingredient_detail(1) is None


class TestFromSettings:
    """Tests for SpoonacularClient.from_settings."""

    def test_live_mode_requires_key(self):
        with pytest.raises(ConfigurationError):
            SpoonacularClient.from_settings(Settings(api_key=None, mock_mode=False))

    def test_mock_mode_without_key(self):
        client = SpoonacularClient.from_settings(Settings(api_key=None, mock_mode=True))

        assert isinstance(client.search_provider, CannedSearchProvider)
        assert client.mock_mode is True

    def test_settings_flow_into_transport(self):
        session = Mock()
        client = SpoonacularClient.from_settings(
            Settings(api_key="K", base_url="https://example.test", retry_attempts=4, read_timeout=3.0),
            session=session,
        )

        assert client.http.session is session
        assert client.http.base_url == "https://example.test"
        assert client.http.retry_attempts == 4
        assert client.http.timeout == (5.0, 3.0)


class TestMalformedPayloads:
    """Structurally wrong bodies surface as UpstreamError, never raw errors."""

    @pytest.mark.parametrize("body", [
        {"id": 1, "nutrition": {"nutrients": ["Calories"]}},
        {"id": 1, "nutrition": []},
    ])
    def test_ingredient_detail(self, body):
        http = Mock()
        http.get_json.return_value = body

        with pytest.raises(UpstreamError) as exc_info:
            SpoonacularClient(http).get_ingredient_detail(1)
        assert exc_info.value.status_code == 502

    def test_search_result_with_non_object_hit(self):
        http = Mock()
        http.get_json.return_value = {"results": ["oops"], "totalResults": 1}

        with pytest.raises(UpstreamError):
            SpoonacularClient(http).search_recipes(SearchCriteria(query="pasta"))
