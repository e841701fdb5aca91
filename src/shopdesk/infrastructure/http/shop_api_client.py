"""aiohttp-backed implementation of OrderSource against the shop REST API.

Endpoints (relative to the configured base URL):

  GET  /shop/get-assigned-orders               -> {"data": [order, ...]}
  PUT  /shop/{orderId}/status                  body {"status": ...}
  PUT  /shop/{orderId}/product-availability    body {"productId": ..., "available": ...}
  GET  /shop/served-orders                     -> {"orders": [order, ...]}

Every request carries the session cookie obtained at login and is bounded
by ``timeout`` seconds.  No request is retried here.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import aiohttp

from shopdesk.domain.exceptions import (
    AuthenticationError,
    NetworkError,
    ServerError,
    ValidationError,
)
from shopdesk.domain.model.order import Availability, LineItem, Order
from shopdesk.domain.model.served_order import ServedOrder
from shopdesk.domain.model.snapshot import OrderSnapshot
from shopdesk.domain.model.value_objects import Money
from shopdesk.domain.port.order_source import OrderSource

logger = logging.getLogger(__name__)


class ShopApiClient(OrderSource):

    def __init__(
        self,
        base_url: str,
        session_cookie: str | None,
        timeout: float = 15.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._cookie = session_cookie
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    # --- Session lifecycle ----------------------------------------------------

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _http(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    # --- OrderSource interface ------------------------------------------------

    async def fetch_assigned_orders(self) -> OrderSnapshot:
        payload = await self._request("GET", "/shop/get-assigned-orders")
        raw_orders = _list_field(payload, "data")
        try:
            return OrderSnapshot.of(self._to_order(raw) for raw in raw_orders)
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            raise ServerError(f"Malformed order payload: {exc}") from exc

    async def update_order_status(self, order_id: str, new_status: str) -> None:
        await self._request(
            "PUT", f"/shop/{quote(order_id, safe='')}/status", {"status": new_status}
        )

    async def set_item_availability(
        self, order_id: str, product_id: str, available: bool
    ) -> None:
        await self._request(
            "PUT",
            f"/shop/{quote(order_id, safe='')}/product-availability",
            {"productId": product_id, "available": available},
        )

    async def fetch_served_orders(self) -> list[ServedOrder]:
        payload = await self._request("GET", "/shop/served-orders")
        raw_orders = _list_field(payload, "orders")
        try:
            return [self._to_served_order(raw) for raw in raw_orders]
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            raise ServerError(f"Malformed served-order payload: {exc}") from exc

    # --- Transport ------------------------------------------------------------

    async def _request(
        self, method: str, path: str, body: dict[str, Any] | None = None
    ) -> Any:
        if not self._cookie:
            raise AuthenticationError("Not logged in: no session cookie configured")

        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            async with self._http().request(
                method, url, json=body, headers={"Cookie": self._cookie}
            ) as resp:
                if resp.status in (401, 403):
                    raise AuthenticationError(
                        f"Session rejected ({resp.status}); please log in again"
                    )
                if not 200 <= resp.status < 300:
                    message = await _error_message(resp)
                    raise ServerError(
                        f"{method} {path} failed with {resp.status}: {message}",
                        status=resp.status,
                    )
                try:
                    return await resp.json(content_type=None)
                except ValueError as exc:
                    if method == "GET":
                        raise ServerError(f"{method} {path} returned invalid JSON") from exc
                    return None
        except asyncio.TimeoutError as exc:
            raise NetworkError(f"{method} {path} timed out") from exc
        except aiohttp.ClientError as exc:
            raise NetworkError(f"{method} {path} failed: {exc}") from exc

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_order(raw: dict) -> Order:
        customer = raw.get("customerId")
        customer_name = customer.get("name", "") if isinstance(customer, dict) else ""
        items = tuple(
            LineItem(
                product_id=_identifier(i["productId"]),
                name=i.get("name") or "",
                quantity=int(i.get("quantity") or 0),
                unit_price=Money.of(i.get("price") or 0),
                description=i.get("description") or "",
                availability=_availability(i.get("isAvailable")),
            )
            for i in raw.get("items") or []
        )
        return Order(
            id=_identifier(raw["_id"]),
            customer_name=customer_name,
            created_at=parse_timestamp(raw["createdAt"]),
            status=str(raw.get("status") or ""),
            total_amount=Money.of(raw.get("totalAmount") or 0),
            items=items,
        )

    @staticmethod
    def _to_served_order(raw: dict) -> ServedOrder:
        delivered = raw.get("deliveredAt")
        return ServedOrder(
            id=_identifier(raw["_id"]),
            total_amount=Money.of(raw.get("totalAmount") or 0),
            payment_status=str(raw.get("paymentStatus") or ""),
            payment_method=str(raw.get("paymentMethod") or ""),
            status=str(raw.get("status") or ""),
            delivered_at=parse_timestamp(delivered) if delivered else None,
        )


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _identifier(value: Any) -> str:
    # Populated references arrive as objects carrying their own _id.
    if isinstance(value, dict):
        value = value["_id"]
    return str(value)


def _availability(flag: Any) -> Availability:
    if flag is None:
        return Availability.UNKNOWN
    return Availability.from_flag(bool(flag))


def _list_field(payload: Any, name: str) -> list:
    if not isinstance(payload, dict):
        raise ServerError(f"Unexpected response body: expected an object with '{name}'")
    value = payload.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ServerError(f"Unexpected response body: '{name}' is not a list")
    return value


async def _error_message(resp: aiohttp.ClientResponse) -> str:
    try:
        body = await resp.json(content_type=None)
    except ValueError:
        return resp.reason or "error"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.reason or "error"
