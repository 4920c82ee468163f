"""Data access helpers (CRUD) for Pokemon.

The storage side of the service: find-many with filter/sort/skip/take,
find-by-id, create, update and delete. All functions are async, take an
`AsyncSession`, and return plain dicts shaped like the API response.
"""

from typing import List, Dict, Any, Optional
from sqlalchemy import select, func, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession
from .models import Pokemon
from .query import PokemonParams, Range

_SORT_COLUMNS = {
    "name": Pokemon.name,
    "height": Pokemon.height,
    "weight": Pokemon.weight,
}


def _row_to_dict(p: Pokemon) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "height": p.height,
        "weight": p.weight,
        "image": p.image,
    }


def _range_clauses(column, bounds: Range) -> list:
    clauses = []
    if bounds.gte is not None:
        clauses.append(column >= bounds.gte)
    if bounds.lte is not None:
        clauses.append(column <= bounds.lte)
    return clauses


async def count_pokemons(session: AsyncSession) -> int:
    q = select(func.count()).select_from(Pokemon)
    res = await session.execute(q)
    return int(res.scalar_one())


async def list_pokemons(
    session: AsyncSession, params: PokemonParams
) -> List[Dict[str, Any]]:
    """Return one page of pokemon matching ``params``.

    Args:
        session: Active async SQLAlchemy session.
        params: Filter, optional ordering and the skip/take window.

    Returns:
        Row dicts in query order. Unordered when ``params.order_by`` is None.
    """
    where = params.where
    q = select(Pokemon)
    if where.name:
        q = q.where(Pokemon.name.contains(where.name, autoescape=True))
    for clause in _range_clauses(Pokemon.height, where.height) + _range_clauses(
        Pokemon.weight, where.weight
    ):
        q = q.where(clause)

    if params.order_by is not None:
        order_func = desc if params.order_by.direction == "desc" else asc
        q = q.order_by(order_func(_SORT_COLUMNS[params.order_by.field]))

    q = q.offset(params.skip).limit(params.take)
    res = await session.execute(q)
    return [_row_to_dict(p) for p in res.scalars().all()]


async def get_pokemon(session: AsyncSession, pokemon_id: int) -> Optional[Dict[str, Any]]:
    p = await session.get(Pokemon, pokemon_id)
    return _row_to_dict(p) if p is not None else None


async def create_pokemon(session: AsyncSession, data: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a new row and commit; the returned dict carries the assigned id."""
    p = Pokemon(**data)
    session.add(p)
    await session.commit()
    await session.refresh(p)
    return _row_to_dict(p)


async def update_pokemon(
    session: AsyncSession, pokemon_id: int, data: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Replace the fields of an existing row. Returns None if the id is unknown."""
    p = await session.get(Pokemon, pokemon_id)
    if p is None:
        return None
    for key, value in data.items():
        setattr(p, key, value)
    await session.commit()
    await session.refresh(p)
    return _row_to_dict(p)


async def delete_pokemon(
    session: AsyncSession, pokemon_id: int
) -> Optional[Dict[str, Any]]:
    """Delete a row and return its last state, or None if the id is unknown."""
    p = await session.get(Pokemon, pokemon_id)
    if p is None:
        return None
    removed = _row_to_dict(p)
    await session.delete(p)
    await session.commit()
    return removed
