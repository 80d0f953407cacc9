"""Formatters for API responses (camelCase JSON) and CLI output (Markdown)."""

import json
import re
from typing import Any, Dict, List, Optional

from recipes_buddy.data_layer.models import (
    CalorieUpdateResponse,
    Ingredient,
    Nutrient,
    NutritionSnapshot,
    RecipeDetail,
    RecipeSearchResult,
    RecipeSummary,
)

_TAG_RE = re.compile(r"<[^>]+>")


def format_nutrient_json(nutrient: Nutrient) -> Dict[str, Any]:
    return {"name": nutrient.name, "amount": nutrient.amount, "unit": nutrient.unit}


def format_nutrition_json(nutrition: Optional[NutritionSnapshot]) -> Optional[Dict[str, Any]]:
    if nutrition is None:
        return None
    return {
        "nutrients": [format_nutrient_json(n) for n in nutrition.nutrients],
        "totalCalories": nutrition.total_calories,
    }


def format_ingredient_json(ingredient: Ingredient) -> Dict[str, Any]:
    return {
        "id": ingredient.id,
        "name": ingredient.name,
        "original": ingredient.original,
        "amount": ingredient.amount,
        "unit": ingredient.unit,
        "image": ingredient.image,
        "nutrition": format_nutrition_json(ingredient.nutrition),
    }


def format_summary_json(summary: RecipeSummary) -> Dict[str, Any]:
    return {
        "id": summary.id,
        "title": summary.title,
        "image": summary.image,
        "imageType": summary.image_type,
        "readyInMinutes": summary.ready_in_minutes,
        "servings": summary.servings,
        "nutrition": format_nutrition_json(summary.nutrition),
    }


def format_search_json(result: RecipeSearchResult) -> Dict[str, Any]:
    """Format a search page in the shape the web client renders."""
    return {
        "results": [format_summary_json(r) for r in result.results],
        "offset": result.offset,
        "number": result.number,
        "totalResults": result.total_results,
    }


def format_recipe_json(recipe: RecipeDetail) -> Dict[str, Any]:
    """Format a recipe detail in the shape the web client renders."""
    return {
        "id": recipe.id,
        "title": recipe.title,
        "image": recipe.image,
        "servings": recipe.servings,
        "readyInMinutes": recipe.ready_in_minutes,
        "summary": recipe.summary,
        "extendedIngredients": [format_ingredient_json(i) for i in recipe.extended_ingredients],
        "instructions": recipe.instructions,
        "nutrition": format_nutrition_json(recipe.nutrition),
        "vegetarian": recipe.vegetarian,
        "vegan": recipe.vegan,
        "glutenFree": recipe.gluten_free,
        "dairyFree": recipe.dairy_free,
    }


def format_calories_json(response: CalorieUpdateResponse) -> Dict[str, Any]:
    return {
        "recipeId": response.recipe_id,
        "originalCalories": response.original_calories,
        "updatedCalories": response.updated_calories,
        "caloriesReduced": response.calories_reduced,
        "ingredientsExcluded": response.ingredients_excluded,
    }


def format_json_string(data: Dict[str, Any]) -> str:
    """Serialize a formatted payload for terminal output."""
    return json.dumps(data, indent=2)


def strip_html(text: str) -> str:
    """Drop the HTML tags Spoonacular embeds in summaries and instructions."""
    return _TAG_RE.sub("", text or "").strip()


def format_ingredient_string(ingredient: Ingredient) -> str:
    """Format an ingredient line (e.g. "[1001] 2 cups flour").

    Falls back to the provider's original text when no amount is known.
    """
    if ingredient.amount is None:
        text = ingredient.original or ingredient.name
    else:
        if ingredient.amount == int(ingredient.amount):
            qty_str = str(int(ingredient.amount))
        else:
            qty_str = f"{ingredient.amount:.2f}".rstrip("0").rstrip(".")
        parts = [qty_str, ingredient.unit, ingredient.name]
        text = " ".join(p for p in parts if p)
    return f"[{ingredient.id}] {text}"


def _diet_flags(recipe: RecipeDetail) -> List[str]:
    flags = []
    if recipe.vegetarian:
        flags.append("vegetarian")
    if recipe.vegan:
        flags.append("vegan")
    if recipe.gluten_free:
        flags.append("gluten-free")
    if recipe.dairy_free:
        flags.append("dairy-free")
    return flags


def format_search_markdown(result: RecipeSearchResult) -> str:
    lines = [f"# Search Results ({result.total_results} total)\n"]
    if not result.results:
        lines.append("_No recipes found._")
        return "\n".join(lines)
    for summary in result.results:
        calories = summary.nutrition.total_calories if summary.nutrition else 0.0
        details = []
        if summary.ready_in_minutes is not None:
            details.append(f"{summary.ready_in_minutes} min")
        if summary.servings is not None:
            details.append(f"{summary.servings} servings")
        if calories:
            details.append(f"{calories:.0f} kcal")
        suffix = f" ({', '.join(details)})" if details else ""
        lines.append(f"- **{summary.title}** [id {summary.id}]{suffix}")
    return "\n".join(lines)


def format_recipe_markdown(recipe: RecipeDetail) -> str:
    lines = [f"# {recipe.title}\n"]
    meta = []
    if recipe.ready_in_minutes is not None:
        meta.append(f"**Ready in:** {recipe.ready_in_minutes} min")
    if recipe.servings is not None:
        meta.append(f"**Servings:** {recipe.servings}")
    if recipe.total_calories:
        meta.append(f"**Calories:** {recipe.total_calories:.0f} kcal")
    flags = _diet_flags(recipe)
    if flags:
        meta.append(f"**Diet:** {', '.join(flags)}")
    if meta:
        lines.append(" | ".join(meta) + "\n")

    summary = strip_html(recipe.summary)
    if summary:
        lines.append(summary + "\n")

    lines.append("## Ingredients\n")
    for ingredient in recipe.extended_ingredients:
        lines.append(f"- {format_ingredient_string(ingredient)}")

    instructions = strip_html(recipe.instructions)
    if instructions:
        lines.append("\n## Instructions\n")
        lines.append(instructions)
    return "\n".join(lines)


def format_calories_markdown(response: CalorieUpdateResponse) -> str:
    return "\n".join([
        f"# Calorie Update for Recipe {response.recipe_id}\n",
        f"- **Original:** {response.original_calories:.0f} kcal",
        f"- **Updated:** {response.updated_calories:.0f} kcal",
        f"- **Reduced by:** {response.calories_reduced:.0f} kcal",
        f"- **Ingredients excluded:** {response.ingredients_excluded}",
    ])
