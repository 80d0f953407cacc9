"""Data models for the recipes buddy backend.

Value types are built from Spoonacular JSON payloads through ``from_dict``
classmethods. Keys are camelCase on the wire and snake_case here; the
reverse mapping lives in :mod:`recipes_buddy.output.formatters`.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

CALORIES_NUTRIENT = "Calories"


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


@dataclass(frozen=True)
class Nutrient:
    """A single nutrient entry (e.g. "Calories", 350.0, "kcal")."""

    name: str
    amount: float
    unit: str = ""

    def matches(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return (self.name or "").lower() == name.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Nutrient":
        return cls(
            name=data.get("name") or "",
            amount=_as_float(data.get("amount")),
            unit=data.get("unit") or "",
        )


@dataclass(frozen=True)
class NutritionSnapshot:
    """Nutrient list plus the derived total calories.

    Attributes:
        nutrients: Nutrients as reported by the provider
        total_calories: Total kcal; 0.0 means "not available"
    """

    nutrients: Tuple[Nutrient, ...] = ()
    total_calories: float = 0.0

    def calories_from_nutrients(self) -> float:
        """Return the amount of the first "Calories" nutrient, or 0.0."""
        for nutrient in self.nutrients:
            if nutrient.matches(CALORIES_NUTRIENT):
                return nutrient.amount
        return 0.0

    def sum_calories(self) -> float:
        """Sum every nutrient named "Calories".

        Ingredient payloads occasionally report calories more than once;
        all entries count towards the ingredient's contribution.
        """
        return sum(n.amount for n in self.nutrients if n.matches(CALORIES_NUTRIENT))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["NutritionSnapshot"]:
        """Parse a provider ``nutrition`` object.

        A missing or zero ``totalCalories`` is filled from the nutrient list.
        """
        if data is None:
            return None
        nutrients = tuple(Nutrient.from_dict(n) for n in data.get("nutrients") or [])
        snapshot = cls(nutrients=nutrients, total_calories=_as_float(data.get("totalCalories")))
        if not snapshot.total_calories:
            snapshot = cls(nutrients=nutrients, total_calories=snapshot.calories_from_nutrients())
        return snapshot


@dataclass(frozen=True)
class Ingredient:
    """An ingredient line of a recipe.

    ``id`` is only unique within one recipe's ingredient list.
    """

    id: Optional[int]
    name: str
    original: str = ""
    amount: Optional[float] = None
    unit: str = ""
    image: Optional[str] = None
    nutrition: Optional[NutritionSnapshot] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ingredient":
        amount = data.get("amount")
        if amount is not None:
            amount = float(amount)
        if amount is not None and amount < 0:
            raise ValueError(f"Ingredient amount cannot be negative: {amount}")
        return cls(
            id=_as_int(data.get("id")),
            name=data.get("name") or "",
            original=data.get("original") or "",
            amount=amount,
            unit=data.get("unit") or "",
            image=data.get("image"),
            nutrition=NutritionSnapshot.from_dict(data.get("nutrition")),
        )


@dataclass(frozen=True)
class RecipeSummary:
    """One search hit."""

    id: int
    title: str
    image: Optional[str] = None
    image_type: Optional[str] = None
    ready_in_minutes: Optional[int] = None
    servings: Optional[int] = None
    nutrition: Optional[NutritionSnapshot] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeSummary":
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            image=data.get("image"),
            image_type=data.get("imageType"),
            ready_in_minutes=_as_int(data.get("readyInMinutes")),
            servings=_as_int(data.get("servings")),
            nutrition=NutritionSnapshot.from_dict(data.get("nutrition")),
        )


@dataclass(frozen=True)
class RecipeSearchResult:
    """A page of search results."""

    results: Tuple[RecipeSummary, ...]
    total_results: int
    offset: int = 0
    number: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeSearchResult":
        results = tuple(RecipeSummary.from_dict(r) for r in data.get("results") or [])
        return cls(
            results=results,
            total_results=int(data.get("totalResults") or 0),
            offset=int(data.get("offset") or 0),
            number=int(data.get("number") or len(results)),
        )


@dataclass(frozen=True)
class RecipeDetail:
    """Full recipe information including ingredients and nutrition."""

    id: int
    title: str
    image: Optional[str] = None
    servings: Optional[int] = None
    ready_in_minutes: Optional[int] = None
    summary: str = ""
    instructions: str = ""
    extended_ingredients: Tuple[Ingredient, ...] = ()
    nutrition: Optional[NutritionSnapshot] = None
    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False
    dairy_free: bool = False

    @property
    def total_calories(self) -> float:
        """Authoritative original calories (0.0 when unknown)."""
        if self.nutrition is None:
            return 0.0
        return self.nutrition.total_calories

    def find_ingredient(self, ingredient_id: int) -> Optional[Ingredient]:
        """Return the first ingredient with ``ingredient_id``, if any."""
        for ingredient in self.extended_ingredients:
            if ingredient.id == ingredient_id:
                return ingredient
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeDetail":
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            image=data.get("image"),
            servings=_as_int(data.get("servings")),
            ready_in_minutes=_as_int(data.get("readyInMinutes")),
            summary=data.get("summary") or "",
            instructions=data.get("instructions") or "",
            extended_ingredients=tuple(
                Ingredient.from_dict(i) for i in data.get("extendedIngredients") or []
            ),
            nutrition=NutritionSnapshot.from_dict(data.get("nutrition")),
            vegetarian=bool(data.get("vegetarian", False)),
            vegan=bool(data.get("vegan", False)),
            gluten_free=bool(data.get("glutenFree", False)),
            dairy_free=bool(data.get("dairyFree", False)),
        )


@dataclass(frozen=True)
class SearchCriteria:
    """Inbound search parameters.

    Numeric bounds of ``None`` or ``0`` both mean "not set"; see
    :meth:`active_filters`.
    """

    query: str
    exclude_ingredients: Tuple[str, ...] = ()
    include_ingredients: Optional[str] = None
    max_calories: Optional[int] = None
    max_carbs: Optional[int] = None
    min_protein: Optional[int] = None
    max_fat: Optional[int] = None
    size: int = 12
    offset: int = 0

    def active_filters(self) -> Dict[str, Any]:
        """Return the optional filters that should be sent upstream."""
        filters: Dict[str, Any] = {}
        excludes = [e.strip() for e in self.exclude_ingredients if e and e.strip()]
        if excludes:
            filters["excludeIngredients"] = ",".join(excludes)
        if self.include_ingredients and self.include_ingredients.strip():
            filters["includeIngredients"] = self.include_ingredients.strip()
        for key, value in (
            ("maxCalories", self.max_calories),
            ("maxCarbs", self.max_carbs),
            ("minProtein", self.min_protein),
            ("maxFat", self.max_fat),
        ):
            if value is not None and value > 0:
                filters[key] = value
        return filters


@dataclass
class CalorieUpdateRequest:
    """Request to recompute calories without some ingredients."""

    recipe_id: int
    excluded_ingredient_ids: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class CalorieUpdateResponse:
    """Before/after calorie comparison for a recipe."""

    recipe_id: int
    original_calories: float
    updated_calories: float
    calories_reduced: float
    ingredients_excluded: int
