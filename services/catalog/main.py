"""Catalog service API built with FastAPI.

This module exposes read-only endpoints for restaurants and menu items.
Every lookup accepts an optional ``country`` query parameter; entries from
another country answer 404 exactly like missing ones. Persistence is
delegated to the SQLAlchemy-backed repository in ``repo.CatalogRepo``.
"""

import logging
import time
import uuid
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel
from pythonjsonlogger import jsonlogger
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from repo import CatalogRepo, engine, init_db

app = FastAPI(title="Catalog Service")

CountryParam = Optional[Literal["India", "America"]]

logger = logging.getLogger("catalog")
if not logger.handlers:
    h = logging.StreamHandler()
    h.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"))
    logger.addHandler(h)
    logger.setLevel(logging.INFO)


@app.on_event("startup")
def _startup_db():
    # short wait until the DB accepts connections
    deadline = time.time() + 30
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("select 1"))
            break
        except OperationalError:
            if time.time() > deadline:
                raise
            time.sleep(1)
    init_db()


class RestaurantOut(BaseModel):
    id: str
    name: str
    country: str
    description: str = ""


class MenuItemOut(BaseModel):
    """A menu item as served to the ordering service.

    Attributes:
        restaurant_id: Owning restaurant.
        price_cents: Unit price in integer cents.
    """
    id: str
    restaurant_id: str
    name: str
    price_cents: int
    country: str
    description: str = ""


def _not_found():
    return HTTPException(status_code=404, detail="NOT_FOUND")


@app.get("/health")
def health():
    """Liveness/health probe endpoint."""
    return {"ok": True}


@app.get("/restaurants", response_model=List[RestaurantOut])
def list_restaurants(country: CountryParam = None):
    return CatalogRepo().find_restaurants(country)


@app.get("/restaurants/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(restaurant_id: str, country: CountryParam = None):
    found = CatalogRepo().find_restaurant(restaurant_id, country)
    if found is None:
        raise _not_found()
    return found


@app.get("/restaurants/{restaurant_id}/menu", response_model=List[MenuItemOut])
def list_menu(restaurant_id: str, country: CountryParam = None):
    """List a restaurant's menu.

    Raises:
        HTTPException: 404 when the restaurant is missing or filtered out.
    """
    repo = CatalogRepo()
    if repo.find_restaurant(restaurant_id, country) is None:
        raise _not_found()
    return repo.find_menu_items(restaurant_id, country)


@app.get("/menu-items/{menu_item_id}", response_model=MenuItemOut)
def get_menu_item(menu_item_id: str, country: CountryParam = None):
    found = CatalogRepo().find_menu_item(menu_item_id, country)
    if found is None:
        raise _not_found()
    return found


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid
    try:
        response = await call_next(request)
    finally:
        logger.info("request handled", extra={"request_id": rid, "path": request.url.path, "method": request.method})
    response.headers["X-Request-ID"] = rid
    return response


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "9001")),
        workers=int(os.getenv("UVICORN_WORKERS", str(max(2, (os.cpu_count() or 1))))),
        log_level=os.getenv("LOG_LEVEL", "info"),
    )
