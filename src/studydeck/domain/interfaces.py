from abc import ABC, abstractmethod

from studydeck.domain.models import Deck


class DeckSource(ABC):
    """
    Supplies deck definitions. Loading is the only asynchronous boundary
    in front of the session engine.
    """

    @abstractmethod
    async def list_deck_paths(self, scope: str) -> list[str]:
        """Return the deck file paths that live directly inside ``scope``."""
        pass

    @abstractmethod
    async def load_deck(self, path: str) -> Deck:
        """
        Load and validate one deck.

        Raises:
            DeckValidationError: If the deck is structurally invalid.
        """
        pass
