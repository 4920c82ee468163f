"""Error taxonomy raised by the record service and mapped to HTTP 400."""

from typing import List


class PokemonError(Exception):
    """Base class for client-side errors; ``detail`` is shown to the caller."""

    detail = "Bad request"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationFailed(PokemonError):
    """One or more fields of a create/update payload are invalid."""

    detail = "Validation failed"

    def __init__(self, errors: List[str]):
        super().__init__()
        self.errors = list(errors)


class InvalidId(PokemonError):
    """The id is malformed, negative, or does not reference a stored record."""

    detail = "Invalid id"


class InvalidArgument(PokemonError):
    """A list query argument is outside its accepted set of values."""
