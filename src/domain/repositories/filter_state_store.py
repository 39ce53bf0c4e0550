"""Filter state persistence port."""

from typing import Protocol

from domain.entities.filter_state import FilterState


class IFilterStateStore(Protocol):
    """Where the listing filters survive between sessions."""

    def load(self) -> FilterState:
        """Read the saved state, falling back to defaults for absent keys."""
        ...

    def save(self, state: FilterState) -> None:
        """Persist the full state."""
        ...

    def clear(self) -> None:
        """Forget every saved key."""
        ...
