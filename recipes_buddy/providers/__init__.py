"""Search provider abstraction layer.

This package decouples the retrieval client from the search data source
(canned JSON vs. live Spoonacular API).
"""

from recipes_buddy.providers.search_provider import RecipeSearchProvider
from recipes_buddy.providers.canned_provider import CannedSearchProvider
from recipes_buddy.providers.live_provider import LiveSearchProvider

__all__ = [
    "RecipeSearchProvider",
    "CannedSearchProvider",
    "LiveSearchProvider",
]
