"""Shared fixtures: Spoonacular payloads and fake HTTP responses."""

from unittest.mock import Mock

import pytest


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects."""

    def _make(status_code=200, payload=None, text=""):
        response = Mock()
        response.status_code = status_code
        response.text = text
        if isinstance(payload, Exception):
            response.json.side_effect = payload
        else:
            response.json.return_value = payload
        return response

    return _make


@pytest.fixture
def recipe_payload():
    """Recipe 123: 350 kcal total, flour (id 1) and butter (id 2)."""
    return {
        "id": 123,
        "title": "Butter Biscuits",
        "image": "https://img.spoonacular.com/recipes/123-556x370.jpg",
        "servings": 4,
        "readyInMinutes": 25,
        "summary": "Flaky <b>butter</b> biscuits.",
        "instructions": "<ol><li>Mix.</li><li>Bake.</li></ol>",
        "vegetarian": True,
        "vegan": False,
        "glutenFree": False,
        "dairyFree": False,
        "extendedIngredients": [
            {
                "id": 1,
                "name": "flour",
                "original": "2 cups flour",
                "amount": 2.0,
                "unit": "cups",
                "image": "flour.png",
            },
            {
                "id": 2,
                "name": "butter",
                "original": "1/2 cup butter",
                "amount": 0.5,
                "unit": "cup",
                "image": "butter.png",
            },
        ],
        "nutrition": {
            "nutrients": [
                {"name": "Calories", "amount": 350.0, "unit": "kcal"},
                {"name": "Fat", "amount": 18.0, "unit": "g"},
            ],
            "totalCalories": 350.0,
        },
    }


@pytest.fixture
def ingredient_payload():
    """Factory for ``/food/ingredients/{id}/information`` bodies."""

    def _make(ingredient_id, calories, name="ingredient"):
        return {
            "id": ingredient_id,
            "name": name,
            "original": name,
            "amount": 1.0,
            "unit": "serving",
            "nutrition": {
                "nutrients": [{"name": "Calories", "amount": calories, "unit": "kcal"}],
            },
        }

    return _make


@pytest.fixture
def search_payload():
    return {
        "results": [
            {
                "id": 716429,
                "title": "Pasta with Garlic",
                "image": "https://img.spoonacular.com/recipes/716429-312x231.jpg",
                "imageType": "jpg",
                "readyInMinutes": 45,
                "servings": 2,
                "nutrition": {
                    "nutrients": [{"name": "Calories", "amount": 584.46, "unit": "kcal"}]
                },
            }
        ],
        "offset": 0,
        "number": 1,
        "totalResults": 86,
    }
