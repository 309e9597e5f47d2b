"""Errors raised when an internal conversion invariant is broken."""

from typing import Optional


class TextureContractError(RuntimeError):
    """A conversion invariant was violated for a single texture.

    These are programming or data-integrity errors, not user-facing skips.
    The encoder fills in ``resource_name`` before the error leaves it.
    """

    def __init__(self, invariant: str, resource_name: Optional[str] = None):
        super().__init__(invariant)
        self.invariant = invariant
        self.resource_name = resource_name

    def __str__(self) -> str:
        if self.resource_name is None:
            return self.invariant
        return f"Texture '{self.resource_name}': {self.invariant}"
