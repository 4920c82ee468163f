"""Record service: validation, normalization and CRUD orchestration.

Sits between the HTTP routes and `crud`. All input checks run before any
storage mutation, so a rejected request never leaves a partial write behind.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from . import crud, metrics
from .errors import InvalidId, ValidationFailed
from .query import (
    PokemonParams,
    PokemonQuery,
    construct_params,
    in_column_range,
    parse_int,
)

log = logging.getLogger(__name__)


def validate_data(data: Mapping[str, Any]) -> Optional[List[str]]:
    """Check a create/update payload.

    Every field is checked, so the caller sees all problems at once.

    Returns:
        A list of messages, or None when the payload is valid.
    """
    errors: List[str] = []
    height = parse_int(data.get("height"))
    weight = parse_int(data.get("weight"))

    if not data.get("name"):
        errors.append("Invalid name")
    if not in_column_range(height) or height < 0:
        errors.append("Invalid height")
    if not in_column_range(weight) or weight < 0:
        errors.append("Invalid weight")
    # only presence is checked for now; no URL parsing
    if not data.get("image"):
        errors.append("Invalid image url")

    return errors or None


def resolve_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize an already validated payload to column types."""
    return {
        "name": str(data["name"]),
        "height": parse_int(data["height"]),
        "weight": parse_int(data["weight"]),
        "image": str(data["image"]),
    }


class PokemonService:
    """CRUD operations over the pokemon table for one request's session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self, query: PokemonQuery) -> Tuple[List[Dict[str, Any]], int]:
        params = construct_params(query)
        return await self.list_params(params)

    async def list_params(
        self, params: PokemonParams
    ) -> Tuple[List[Dict[str, Any]], int]:
        rows = await crud.list_pokemons(self.session, params)
        log.info(
            "service.list where=%s order_by=%s skip=%d take=%d returned=%d",
            params.where,
            params.order_by,
            params.skip,
            params.take,
            len(rows),
        )
        return rows, params.page

    async def get(self, pokemon_id: int) -> Optional[Dict[str, Any]]:
        return await crud.get_pokemon(self.session, pokemon_id)

    async def validate_id(self, raw_id: Any) -> int:
        """Return ``raw_id`` as an int that references a stored record.

        Raises:
            InvalidId: if the id is not a non-negative integer within the column
                range, or is unknown.
        """
        pokemon_id = parse_int(raw_id)
        # ids past the column range cannot exist and must not reach the driver
        if in_column_range(pokemon_id) and pokemon_id >= 0:
            if await self.get(pokemon_id) is not None:
                return pokemon_id
        log.info("service.invalid_id id=%r", raw_id)
        raise InvalidId()

    def _check(self, data: Mapping[str, Any], op: str) -> Dict[str, Any]:
        errors = validate_data(data)
        if errors:
            metrics.record_validation_failure(op)
            log.info("service.validation_failed op=%s errors=%s", op, errors)
            raise ValidationFailed(errors)
        return resolve_data(data)

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        values = self._check(data, "create")
        created = await crud.create_pokemon(self.session, values)
        metrics.record_mutation("create")
        log.info("service.create id=%d", created["id"])
        return created

    async def update(self, raw_id: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Replace all fields of a record; payload errors win over id errors."""
        values = self._check(data, "update")
        pokemon_id = await self.validate_id(raw_id)
        updated = await crud.update_pokemon(self.session, pokemon_id, values)
        if updated is None:
            # removed between the id check and the update
            raise InvalidId()
        metrics.record_mutation("update")
        log.info("service.update id=%d", pokemon_id)
        return updated

    async def delete(self, raw_id: Any) -> Dict[str, Any]:
        pokemon_id = await self.validate_id(raw_id)
        removed = await crud.delete_pokemon(self.session, pokemon_id)
        if removed is None:
            raise InvalidId()
        metrics.record_mutation("delete")
        log.info("service.delete id=%d", pokemon_id)
        return removed
