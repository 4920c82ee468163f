"""Translate raw list query parameters into structured storage parameters.

Every input arrives as an optional string straight from the query string.
Filter bounds and the page number are parsed leniently (anything that is not
an integer means "no bound" / page 1), while the page size is checked strictly
against `PAGE_SIZES` and rejected with `InvalidArgument` otherwise.
"""

import math
import re
from typing import NamedTuple, Optional

from .errors import InvalidArgument

PAGE_SIZES = (10, 20, 50)
DEFAULT_PAGE_SIZE = 10
SORT_FIELDS = ("name", "height", "weight")

# largest value an INTEGER column holds on every backend (Postgres int4)
MAX_INT = 2**31 - 1

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


class PokemonQuery(NamedTuple):
    """Raw query-string values, as received."""

    order_by: Optional[str] = None
    order_dir: Optional[str] = None
    name: Optional[str] = None
    height_gte: Optional[str] = None
    height_leq: Optional[str] = None
    weight_gte: Optional[str] = None
    weight_leq: Optional[str] = None
    page: Optional[str] = None
    page_size: Optional[str] = None


class Range(NamedTuple):
    """Inclusive numeric bounds; ``None`` leaves that side open."""

    gte: Optional[int] = None
    lte: Optional[int] = None


class PokemonFilter(NamedTuple):
    name: Optional[str] = None
    height: Range = Range()
    weight: Range = Range()


class PokemonOrder(NamedTuple):
    field: str
    direction: str = "asc"


class PokemonParams(NamedTuple):
    where: PokemonFilter
    order_by: Optional[PokemonOrder]
    skip: int
    take: int

    @property
    def page(self) -> int:
        return self.skip // self.take + 1


def parse_int(value) -> Optional[int]:
    """Return ``value`` as an int when it denotes an integer, else ``None``.

    Accepts ints, integral floats and plain ASCII numeric strings (``"12"``,
    ``" 12.0 "``, ``"1e3"``). Booleans, blanks, NaN/inf, fractional values,
    underscore separators and non-ASCII digits yield ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if _INT_RE.fullmatch(value):
            return int(value)
        if not _DECIMAL_RE.fullmatch(value):
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def in_column_range(value: Optional[int]) -> bool:
    return value is not None and -MAX_INT - 1 <= value <= MAX_INT


def parse_bound(value: Optional[str]) -> Optional[int]:
    """Lenient filter bound: unparsable or out-of-range values mean no bound."""
    number = parse_int(value)
    return number if in_column_range(number) else None


def resolve_page_size(page_size: Optional[str]) -> int:
    if page_size is None:
        return DEFAULT_PAGE_SIZE
    if page_size in {str(size) for size in PAGE_SIZES}:
        return int(page_size)
    raise InvalidArgument(
        "Invalid page size. Valid sizes: " + ", ".join(str(s) for s in PAGE_SIZES)
    )


def resolve_page(query: PokemonQuery) -> tuple[int, int]:
    """Return the ``(skip, take)`` pair for the requested page.

    Pages past the last one whose offset fits in `MAX_INT` are capped to it.
    """
    take = resolve_page_size(query.page_size)
    page = parse_int(query.page)
    if not page or page < 1:
        page = 1
    page = min(page, MAX_INT // take + 1)
    return take * (page - 1), take


def resolve_where(query: PokemonQuery) -> PokemonFilter:
    return PokemonFilter(
        name=query.name or None,
        height=Range(parse_bound(query.height_gte), parse_bound(query.height_leq)),
        weight=Range(parse_bound(query.weight_gte), parse_bound(query.weight_leq)),
    )


def resolve_order_by(query: PokemonQuery) -> Optional[PokemonOrder]:
    if query.order_by not in SORT_FIELDS:
        return None
    direction = "desc" if query.order_dir == "desc" else "asc"
    return PokemonOrder(query.order_by, direction)


def construct_params(query: PokemonQuery) -> PokemonParams:
    """Build storage parameters for a list query.

    The page size is resolved first so an invalid value is rejected before
    anything else is looked at.

    Raises:
        InvalidArgument: if ``page_size`` is not one of `PAGE_SIZES`.
    """
    skip, take = resolve_page(query)
    return PokemonParams(
        where=resolve_where(query),
        order_by=resolve_order_by(query),
        skip=skip,
        take=take,
    )
