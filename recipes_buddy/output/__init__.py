"""Output formatting for API responses and CLI output."""

from recipes_buddy.output.formatters import (
    format_search_json,
    format_recipe_json,
    format_calories_json,
    format_search_markdown,
    format_recipe_markdown,
    format_calories_markdown,
)

__all__ = [
    "format_search_json",
    "format_recipe_json",
    "format_calories_json",
    "format_search_markdown",
    "format_recipe_markdown",
    "format_calories_markdown",
]
