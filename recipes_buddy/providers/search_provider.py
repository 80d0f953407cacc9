"""Abstract base class for recipe search providers.

The retrieval client depends ONLY on this interface for search. Concrete
implementations answer from the bundled canned payload or from the live
Spoonacular API; the choice is made once, when the client is built.
"""

from abc import ABC, abstractmethod

from recipes_buddy.data_layer.models import RecipeSearchResult, SearchCriteria


class RecipeSearchProvider(ABC):
    """Abstraction for recipe search."""

    #: Short label used in logs ("mock" or "live").
    mode: str = "unknown"

    @abstractmethod
    def search(self, criteria: SearchCriteria) -> RecipeSearchResult:
        """Return one page of results for *criteria*.

        Args:
            criteria: Already-validated search criteria.

        Returns:
            RecipeSearchResult (possibly with zero results).

        Raises:
            UpstreamError: If the data source cannot be read.
        """
        ...
