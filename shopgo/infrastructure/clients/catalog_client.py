from __future__ import annotations

import logging
import time
from decimal import Decimal
from threading import Lock

import httpx

from shopgo.application.ports.catalog_port import CatalogPort
from shopgo.domain.entities.cart import Product
from shopgo.domain.exceptions import StorageFailureError


logger = logging.getLogger(__name__)


class FakeStoreCatalogClient(CatalogPort):
    """Reads products from a FakeStore-compatible API with a small TTL cache."""

    def __init__(
        self,
        api_base: str,
        timeout_seconds: float,
        cache_ttl_seconds: float = 300,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self._transport = transport
        self._cache: dict[int, tuple[float, Product]] = {}
        self._lock = Lock()

    def _cache_get(self, product_id: int) -> Product | None:
        if self.cache_ttl_seconds <= 0:
            return None
        now = time.monotonic()
        with self._lock:
            cached = self._cache.get(product_id)
            if cached is None:
                return None
            expires_at, product = cached
            if expires_at <= now:
                self._cache.pop(product_id, None)
                return None
            return product

    def _cache_set(self, product: Product) -> None:
        if self.cache_ttl_seconds <= 0:
            return
        expires_at = time.monotonic() + self.cache_ttl_seconds
        with self._lock:
            self._cache[product.id] = (expires_at, product)

    def get_product(self, *, product_id: int) -> Product | None:
        cached = self._cache_get(product_id)
        if cached is not None:
            return cached

        url = f"{self.api_base}/products/{product_id}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(url)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                # FakeStore answers unknown ids with 200 and an empty body.
                payload = response.json() if response.content.strip() else None
        except httpx.HTTPError as exc:
            logger.warning("catalog: request failed product_id=%s error=%s", product_id, exc)
            raise StorageFailureError("Catalog is unavailable.") from exc
        except ValueError as exc:
            raise StorageFailureError("Catalog returned an invalid response.") from exc

        if not payload:
            return None
        product = map_payload_to_product(payload)
        self._cache_set(product)
        return product


def map_payload_to_product(payload: dict) -> Product:
    return Product(
        id=int(payload["id"]),
        title=str(payload.get("title") or ""),
        price=Decimal(str(payload.get("price") or 0)),
        image_url=str(payload.get("image") or ""),
    )
