from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .cities.aliases import display_name
from .places.cache import get_cache_stats
from .places.data_store import PlaceStore, get_store
from .places.errors import PlaceQueryError, StorageError
from .places.models import CitiesResponse, CityOut, PlacesPage
from .places.query import run_query
from .places.validation import parse_query

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Coffee Places API",
    description="Query coffee places in the Netherlands",
    version="1.0.0",
)

api = APIRouter(prefix="/api")


# ── Error rendering ──────────────────────────────────────────────────────


@app.exception_handler(PlaceQueryError)
def handle_place_query_error(request: Request, exc: PlaceQueryError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s: %s", request.url.path, exc, exc_info=exc)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    # Starlette re-raises after this response is sent; the server logs the traceback
    return JSONResponse(status_code=500, content=StorageError().to_body())


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# /places is kept as an alias of /coffee-places for older clients
@api.get("/coffee-places", response_model=PlacesPage, response_model_exclude_none=True)
@api.get("/places", response_model=PlacesPage, response_model_exclude_none=True)
def list_coffee_places(
    request: Request,
    store: PlaceStore = Depends(get_store),
) -> PlacesPage:
    query = parse_query(request.query_params)
    return run_query(query, store)


@api.get("/cities", response_model=CitiesResponse)
def list_cities(store: PlaceStore = Depends(get_store)) -> CitiesResponse:
    cities = [
        CityOut(name=name, display_name=display_name(name), count=count)
        for name, count in store.city_counts()
    ]
    return CitiesResponse(total=len(cities), cities=cities)


@api.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()


app.include_router(api)
