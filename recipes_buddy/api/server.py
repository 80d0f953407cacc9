"""FastAPI server for the Recipes Buddy backend."""

import logging
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Path, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from recipes_buddy import __version__
from recipes_buddy.api.admission import AdmissionController
from recipes_buddy.api.errors import register_exception_handlers
from recipes_buddy.config import Settings, load_settings
from recipes_buddy.data_layer.models import SearchCriteria
from recipes_buddy.ingestion.spoonacular_client import NUTRITION_BOUND_MAX, SpoonacularClient
from recipes_buddy.logging_config import setup_logging
from recipes_buddy.nutrition.calorie_calculator import CalorieRecalculator
from recipes_buddy.output.formatters import (
    format_calories_json,
    format_recipe_json,
    format_search_json,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes")


class CalorieUpdateBody(BaseModel):
    recipeId: int
    excludedIngredientIds: List[int] = Field(..., min_length=1)


def get_client(request: Request) -> SpoonacularClient:
    return request.app.state.client


def get_calculator(request: Request) -> CalorieRecalculator:
    return request.app.state.calculator


@router.get("/search")
def search_recipes(
    query: str = Query(..., min_length=1),
    exclude_ingredients: Optional[List[str]] = Query(None, alias="excludeIngredients"),
    include_ingredients: Optional[str] = Query(None, alias="includeIngredients"),
    max_calories: Optional[int] = Query(None, alias="maxCalories", ge=0, le=NUTRITION_BOUND_MAX),
    max_carbs: Optional[int] = Query(None, alias="maxCarbs", ge=0, le=NUTRITION_BOUND_MAX),
    min_protein: Optional[int] = Query(None, alias="minProtein", ge=0, le=NUTRITION_BOUND_MAX),
    max_fat: Optional[int] = Query(None, alias="maxFat", ge=0, le=NUTRITION_BOUND_MAX),
    size: int = Query(12, ge=1),
    offset: int = Query(0, ge=0),
    client: SpoonacularClient = Depends(get_client),
) -> Dict[str, Any]:
    criteria = SearchCriteria(
        query=query,
        exclude_ingredients=tuple(exclude_ingredients or ()),
        include_ingredients=include_ingredients,
        max_calories=max_calories,
        max_carbs=max_carbs,
        min_protein=min_protein,
        max_fat=max_fat,
        size=size,
        offset=offset,
    )
    logger.info(f"Received search request: {criteria}")
    return format_search_json(client.search_recipes(criteria))


@router.get("/{recipe_id}")
def get_recipe(
    recipe_id: int = Path(..., ge=1),
    client: SpoonacularClient = Depends(get_client),
) -> Dict[str, Any]:
    logger.info(f"Received request for recipe ID: {recipe_id}")
    return format_recipe_json(client.get_recipe_detail(recipe_id))


@router.post("/{recipe_id}/calories")
def calculate_updated_calories(
    body: CalorieUpdateBody,
    recipe_id: int = Path(..., ge=1),
    calculator: CalorieRecalculator = Depends(get_calculator),
) -> Dict[str, Any]:
    logger.info(
        f"Received calorie calculation request for recipe ID: {recipe_id} "
        f"with exclusions: {body.excludedIngredientIds}"
    )
    if body.recipeId != recipe_id:
        logger.warning(f"Recipe ID mismatch: path={recipe_id}, body={body.recipeId}")
    response = calculator.calculate_updated_calories(recipe_id, body.excludedIngredientIds)
    return format_calories_json(response)


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[SpoonacularClient] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Resolved settings (loaded from config/env when omitted)
        client: Retrieval client; built from ``settings`` when omitted

    Raises:
        ConfigurationError: If live mode is configured without an API key
    """
    settings = settings or load_settings()
    client = client or SpoonacularClient.from_settings(settings)

    app = FastAPI(title="Recipes Buddy API", version=__version__)
    app.state.settings = settings
    app.state.client = client
    app.state.calculator = CalorieRecalculator(client, settings.lookup_workers)

    register_exception_handlers(app)

    admission = AdmissionController(
        rate=settings.rate_limit,
        retry_after=settings.retry_after_seconds,
        enabled=settings.rate_limit_enabled,
        storage_uri=settings.rate_limit_storage_uri,
    )
    admission.install(app)
    app.state.admission = admission

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    def health() -> Dict[str, Any]:
        return {"status": "ok", "mockMode": client.mock_mode}

    app.get("/health")(admission.exempt(health))
    app.include_router(router)

    logger.info(
        f"Recipes Buddy API ready [mode={client.search_provider.mode}, rate_limit={settings.rate_limit}]"
    )
    return app


def main(settings: Optional[Settings] = None) -> None:
    settings = settings or load_settings()
    setup_logging(settings.log_level, production=settings.log_json)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
