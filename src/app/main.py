# src/app/main.py
from __future__ import annotations
import logging
import sys

import httpx
from fastapi import FastAPI, Request, Response, status

from src.app.config import settings
from src.app.deps import build_recipe_client
from src.app.routers.favourites import router as favourites_router
from src.app.routers.recipes import router as recipes_router

# Plain stdout logging for dev and containers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

CORS_ALLOW_METHODS = "GET, POST, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type"

app = FastAPI(title="Recipe Favourites API", version="0.1.0")


def _allowed_origin(request: Request) -> str | None:
    origins = settings.FRONTEND_CORS_ORIGINS
    if "*" in origins:
        return "*"
    origin = request.headers.get("origin")
    return origin if origin in origins else None


@app.middleware("http")
async def cors_headers(request: Request, call_next) -> Response:
    # Every response carries the headers, preflight or not; OPTIONS is an empty 200
    if request.method == "OPTIONS":
        response = Response(status_code=status.HTTP_200_OK)
    else:
        response = await call_next(request)

    origin = _allowed_origin(request)
    if origin is not None:
        response.headers["Access-Control-Allow-Origin"] = origin
        if origin != "*":
            response.headers["Vary"] = "Origin"
    response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
    return response


app.include_router(favourites_router)
app.include_router(recipes_router)


@app.on_event("startup")
async def startup() -> None:
    app.state.http_client = httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT_SECONDS)
    app.state.recipe_client = build_recipe_client(settings, app.state.http_client)


@app.on_event("shutdown")
async def shutdown() -> None:
    recipe_client = getattr(app.state, "recipe_client", None)
    if recipe_client is not None:
        await recipe_client.cache.close()
    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()


@app.get("/health")
def health(request: Request):
    recipe_client = getattr(request.app.state, "recipe_client", None)
    if recipe_client is None:
        return {"ok": True, "apiKeys": {"total": 0, "available": 0}}
    rotator = recipe_client.rotator
    return {
        "ok": True,
        "apiKeys": {"total": len(rotator.credentials), "available": rotator.available_count()},
    }
