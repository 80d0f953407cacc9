#!/usr/bin/env python3
"""Command-line interface for the Recipes Buddy backend."""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from recipes_buddy.api.server import main as serve_api
from recipes_buddy.config import DEFAULT_CONFIG_PATH, Settings, load_settings
from recipes_buddy.data_layer.exceptions import RecipesBuddyError
from recipes_buddy.data_layer.models import CalorieUpdateRequest, SearchCriteria
from recipes_buddy.ingestion.spoonacular_client import SpoonacularClient
from recipes_buddy.logging_config import setup_logging
from recipes_buddy.nutrition.calorie_calculator import CalorieRecalculator
from recipes_buddy.output.formatters import (
    format_calories_json,
    format_calories_markdown,
    format_json_string,
    format_recipe_json,
    format_recipe_markdown,
    format_search_json,
    format_search_markdown,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search Spoonacular recipes and recompute calories without selected ingredients"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to settings YAML file (default: {DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Answer searches from the bundled canned data (no API quota consumed)"
    )
    parser.add_argument(
        "--output",
        choices=["markdown", "json"],
        default="markdown",
        help="Output format: markdown (default) or json"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the HTTP API")

    search = subparsers.add_parser("search", help="Search recipes")
    search.add_argument("query", help="Free-text search query")
    search.add_argument("--exclude", action="append", default=[], help="Ingredient to exclude (repeatable)")
    search.add_argument("--include", help="Comma-separated ingredients to include")
    search.add_argument("--max-calories", type=int)
    search.add_argument("--max-carbs", type=int)
    search.add_argument("--min-protein", type=int)
    search.add_argument("--max-fat", type=int)
    search.add_argument("--size", type=int, default=12)
    search.add_argument("--offset", type=int, default=0)

    recipe = subparsers.add_parser("recipe", help="Show recipe details")
    recipe.add_argument("recipe_id", type=int)

    calories = subparsers.add_parser("calories", help="Recompute calories without some ingredients")
    calories.add_argument("recipe_id", type=int)
    calories.add_argument(
        "--exclude", type=int, action="append", required=True,
        help="Ingredient ID to exclude (repeatable)"
    )

    return parser


def run_command(args: argparse.Namespace, settings: Settings, client: Optional[SpoonacularClient] = None) -> str:
    """Execute a non-serve command and return its rendered output.

    Raises:
        RecipesBuddyError: On any domain failure
    """
    client = client or SpoonacularClient.from_settings(settings)
    as_json = args.output == "json"

    if args.command == "search":
        criteria = SearchCriteria(
            query=args.query,
            exclude_ingredients=tuple(args.exclude),
            include_ingredients=args.include,
            max_calories=args.max_calories,
            max_carbs=args.max_carbs,
            min_protein=args.min_protein,
            max_fat=args.max_fat,
            size=args.size,
            offset=args.offset,
        )
        result = client.search_recipes(criteria)
        return format_json_string(format_search_json(result)) if as_json else format_search_markdown(result)

    if args.command == "recipe":
        recipe = client.get_recipe_detail(args.recipe_id)
        return format_json_string(format_recipe_json(recipe)) if as_json else format_recipe_markdown(recipe)

    if args.command == "calories":
        calculator = CalorieRecalculator(client, settings.lookup_workers)
        response = calculator.calculate(
            CalorieUpdateRequest(recipe_id=args.recipe_id, excluded_ingredient_ids=args.exclude)
        )
        return format_json_string(format_calories_json(response)) if as_json else format_calories_markdown(response)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
        if args.mock:
            settings = replace(settings, mock_mode=True)
        setup_logging(settings.log_level, production=settings.log_json, stream=sys.stderr)

        if args.command == "serve":
            serve_api(settings)
            return 0

        print(run_command(args, settings))
        return 0
    except RecipesBuddyError as e:
        if args.output == "json":
            print(format_json_string(e.to_dict()), file=sys.stderr)
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
