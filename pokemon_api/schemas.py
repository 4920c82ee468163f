"""Pydantic schemas for API request/response bodies."""

from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict


class PokemonIn(BaseModel):
    """Create/update body.

    Values are deliberately untyped: the record service validates them and
    reports every bad field in one response.
    """

    model_config = ConfigDict(extra="ignore")

    name: Any = None
    height: Any = None
    weight: Any = None
    image: Any = None


class PokemonOut(BaseModel):
    id: int
    name: str
    height: int
    weight: int
    image: str


class PokemonsPage(BaseModel):
    pokemons: List[PokemonOut]
    page: int


class HealthcheckOut(BaseModel):
    status: Literal["ok", "degraded"]
    db_ok: bool
    pokemon_count: int


class ProblemDetail(BaseModel):
    """RFC 7807-style problem response; ``errors`` lists field messages."""

    type: str = "about:blank"
    title: str
    status: int
    detail: Optional[str] = None
    instance: Optional[str] = None
    errors: Optional[List[str]] = None
