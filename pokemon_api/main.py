"""FastAPI app, lifespan bootstrap, and HTTP routes.

- GET    /              -> redirect to Swagger UI (/docs)
- GET    /healthz       -> liveness, no I/O
- GET    /healthcheck   -> database health and record count
- GET    /pokemon       -> filtered, sorted, paginated list (public)
- POST   /pokemon       -> create (basic auth)
- PUT    /pokemon/{id}  -> replace all fields (basic auth)
- DELETE /pokemon/{id}  -> delete and return the removed record (basic auth)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse, JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud, metrics
from .auth import require_basic_auth
from .db import get_session, init_db, wait_for_db
from .errors import PokemonError
from .logging_config import configure_logging
from .query import PokemonQuery
from .schemas import (
    HealthcheckOut,
    PokemonIn,
    PokemonOut,
    PokemonsPage,
    ProblemDetail,
)
from .service import PokemonService
from .settings import settings

configure_logging()
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wait for the database, then make sure the schema exists."""
    try:
        await wait_for_db()
    except Exception as e:
        log.error("startup.db_wait_failed error=%r", e)
        raise
    await init_db()
    log.info("startup.db_init complete")
    yield


app = FastAPI(title=settings.APP_TITLE, version="1.0.0", lifespan=lifespan)
metrics.install(app)


# ---------------------------------------------------------------------
# Errors (RFC 7807 problem+json)
# ---------------------------------------------------------------------

_STATUS_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


def _problem(
    status: int,
    detail: Optional[str] = None,
    instance: Optional[str] = None,
    errors: Optional[List[str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {
        "type": "about:blank",
        "title": _STATUS_TITLES.get(status, "Error"),
        "status": status,
        "detail": detail,
        "instance": instance,
    }
    if errors is not None:
        body["errors"] = errors
    return JSONResponse(
        status_code=status,
        content=body,
        headers=headers,
        media_type="application/problem+json",
    )


@app.exception_handler(PokemonError)
async def pokemon_error_handler(req: Request, exc: PokemonError):
    return _problem(
        400,
        detail=exc.detail,
        instance=req.url.path,
        errors=getattr(exc, "errors", None),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(req: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else None
    return _problem(
        exc.status_code,
        detail=detail,
        instance=req.url.path,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(req: Request, exc: RequestValidationError):
    msg = exc.errors()[0]["msg"] if exc.errors() else "Validation error"
    return _problem(422, detail=msg, instance=req.url.path)


_problem_resp = {
    "application/problem+json": {"schema": ProblemDetail.model_json_schema()},
}
_bad_request = {400: {"content": _problem_resp, "model": ProblemDetail}}
_guarded = {
    **_bad_request,
    401: {"content": _problem_resp, "model": ProblemDetail},
}


def get_service(session: AsyncSession = Depends(get_session)) -> PokemonService:
    return PokemonService(session)


# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url=app.docs_url or "/docs", status_code=307)


@app.get("/healthz", include_in_schema=False)
async def healthz():
    """Liveness probe; never touches the database."""
    return {"status": "ok"}


@app.get("/healthcheck", response_model=HealthcheckOut)
async def healthcheck(session: AsyncSession = Depends(get_session)):
    db_ok = True
    total = 0
    try:
        total = await crud.count_pokemons(session)
    except Exception as exc:
        db_ok = False
        log.warning("route.healthcheck.db_error error=%r", exc)
    status = "ok" if db_ok else "degraded"
    log.info(
        "route.healthcheck status=%s db_ok=%s pokemon_count=%d", status, db_ok, total
    )
    return {"status": status, "db_ok": db_ok, "pokemon_count": total}


@app.get("/pokemon", response_model=PokemonsPage, responses=_bad_request)
async def list_pokemons(
    order_by: Optional[str] = Query(None, alias="orderBy"),
    order_dir: Optional[str] = Query(None, alias="orderDir"),
    name: Optional[str] = Query(None),
    height_gte: Optional[str] = Query(None, alias="height[gte]"),
    height_leq: Optional[str] = Query(None, alias="height[leq]"),
    weight_gte: Optional[str] = Query(None, alias="weight[gte]"),
    weight_leq: Optional[str] = Query(None, alias="weight[leq]"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    service: PokemonService = Depends(get_service),
):
    """List pokemon with optional name/height/weight filters.

    Bounds on height and weight are inclusive; values that are not integers
    are ignored. ``pageSize`` must be 10, 20 or 50.
    """
    query = PokemonQuery(
        order_by=order_by,
        order_dir=order_dir,
        name=name,
        height_gte=height_gte,
        height_leq=height_leq,
        weight_gte=weight_gte,
        weight_leq=weight_leq,
        page=page,
        page_size=page_size,
    )
    pokemons, current_page = await service.list(query)
    return {"pokemons": pokemons, "page": current_page}


@app.post(
    "/pokemon",
    response_model=PokemonOut,
    status_code=201,
    responses=_guarded,
    dependencies=[Depends(require_basic_auth)],
)
async def create_pokemon(
    payload: Optional[PokemonIn] = None,
    service: PokemonService = Depends(get_service),
):
    created = await service.create((payload or PokemonIn()).model_dump())
    log.info("route.pokemon.create id=%d", created["id"])
    return created


@app.put(
    "/pokemon/{id}",
    response_model=PokemonOut,
    responses=_guarded,
    dependencies=[Depends(require_basic_auth)],
)
async def update_pokemon(
    id: str,
    payload: Optional[PokemonIn] = None,
    service: PokemonService = Depends(get_service),
):
    updated = await service.update(id, (payload or PokemonIn()).model_dump())
    log.info("route.pokemon.update id=%d", updated["id"])
    return updated


@app.delete(
    "/pokemon/{id}",
    response_model=PokemonOut,
    responses=_guarded,
    dependencies=[Depends(require_basic_auth)],
)
async def delete_pokemon(id: str, service: PokemonService = Depends(get_service)):
    removed = await service.delete(id)
    log.info("route.pokemon.delete id=%d", removed["id"])
    return removed
