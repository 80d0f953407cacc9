"""Calorie recalculation for recipes with excluded ingredients."""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List

from recipes_buddy.data_layer.exceptions import InvalidRecipeStateError
from recipes_buddy.data_layer.models import (
    CalorieUpdateRequest,
    CalorieUpdateResponse,
    Ingredient,
)
from recipes_buddy.ingestion.spoonacular_client import SpoonacularClient

logger = logging.getLogger(__name__)


def unique_ids(ids: Iterable[int]) -> List[int]:
    """De-duplicate ``ids`` keeping first occurrences in order."""
    seen = set()
    result = []
    for ingredient_id in ids:
        if ingredient_id not in seen:
            seen.add(ingredient_id)
            result.append(ingredient_id)
    return result


class CalorieRecalculator:
    """Answers "what would this recipe's calories be without these ingredients?".

    One recipe detail fetch plus one ingredient-detail fetch per matched
    exclusion. Nothing is cached: identical calls repeat every lookup.
    """

    def __init__(self, client: SpoonacularClient, lookup_workers: int = 1):
        """Initialize recalculator.

        Args:
            client: Retrieval client used for all lookups
            lookup_workers: 1 for sequential ingredient lookups, more to run
                them on a thread pool
        """
        self.client = client
        self.lookup_workers = max(1, lookup_workers)

    def calculate(self, request: CalorieUpdateRequest) -> CalorieUpdateResponse:
        """Convenience wrapper around :meth:`calculate_updated_calories`."""
        return self.calculate_updated_calories(request.recipe_id, request.excluded_ingredient_ids)

    def calculate_updated_calories(
        self, recipe_id: int, excluded_ingredient_ids: Iterable[int]
    ) -> CalorieUpdateResponse:
        """Recompute a recipe's calories without the excluded ingredients.

        Excluded IDs that do not appear in the recipe are counted but add
        nothing to the reduction. Ingredients whose nutrition cannot be
        resolved contribute 0 calories.

        Args:
            recipe_id: Spoonacular recipe ID
            excluded_ingredient_ids: Ingredient IDs to remove

        Returns:
            CalorieUpdateResponse with original/updated/reduced calories

        Raises:
            RecipeNotFoundError: If the recipe does not exist
            UpstreamError: If the recipe detail lookup fails
            InvalidRecipeStateError: If the recipe has no ingredients or no
                calorie information
        """
        excluded_ids = unique_ids(excluded_ingredient_ids)
        logger.info(
            f"Calculating updated calories for recipe {recipe_id} with exclusions: {excluded_ids}"
        )

        recipe = self.client.get_recipe_detail(recipe_id)

        if not recipe.extended_ingredients:
            raise InvalidRecipeStateError(recipe_id, "Recipe has no ingredients data")

        original_calories = recipe.total_calories
        if not original_calories:
            logger.warning(f"Recipe {recipe_id} has no calorie information")
            raise InvalidRecipeStateError(recipe_id, "Recipe has no calorie information available")

        matched: List[Ingredient] = []
        for ingredient_id in excluded_ids:
            ingredient = recipe.find_ingredient(ingredient_id)
            if ingredient is None:
                logger.debug(f"Ingredient {ingredient_id} is not part of recipe {recipe_id}; skipped")
                continue
            matched.append(ingredient)

        excluded_calories = sum(self._lookup_all(matched))

        updated_calories = max(0.0, original_calories - excluded_calories)
        calories_reduced = original_calories - updated_calories

        logger.info(
            f"Calorie calculation complete: original={original_calories}, "
            f"excluded={excluded_calories}, updated={updated_calories}, reduced={calories_reduced}"
        )

        return CalorieUpdateResponse(
            recipe_id=recipe_id,
            original_calories=original_calories,
            updated_calories=updated_calories,
            calories_reduced=calories_reduced,
            ingredients_excluded=len(excluded_ids),
        )

    def _lookup_all(self, ingredients: List[Ingredient]) -> List[float]:
        if self.lookup_workers == 1 or len(ingredients) < 2:
            return [self.ingredient_calories(i) for i in ingredients]
        with ThreadPoolExecutor(max_workers=self.lookup_workers) as pool:
            return list(pool.map(self.ingredient_calories, ingredients))

    def ingredient_calories(self, ingredient: Ingredient) -> float:
        """Calories of ``ingredient`` at its recipe amount, or 0.0 if unresolvable.

        Lookup failures are logged and absorbed so one bad ingredient never
        fails the whole calculation.
        """
        try:
            info = self.client.get_ingredient_detail(ingredient.id, ingredient.amount, ingredient.unit)
        except Exception as e:
            logger.warning(f"Error fetching ingredient calories for ID {ingredient.id}: {e}")
            return 0.0

        if info is None or info.nutrition is None:
            logger.warning(f"No nutrition data for ingredient {ingredient.id}; counting 0 calories")
            return 0.0

        calories = info.nutrition.sum_calories()
        logger.debug(f"Ingredient {ingredient.name} ({ingredient.id}) contributes {calories} calories")
        return calories
