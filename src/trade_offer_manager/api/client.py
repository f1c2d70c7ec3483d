"""Trade API client - authenticated httpx calls against the trade WebAPI."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from trade_offer_manager.api import endpoints
from trade_offer_manager.api.endpoints import ApiRequest
from trade_offer_manager.exceptions import APIStatusError, TradeOfferError, TransportError
from trade_offer_manager.models.config import DEFAULT_API_URL
from trade_offer_manager.models.offers import Offer, OfferId, OfferState
from trade_offer_manager.models.records import InventoryPage, OfferPage

log = logging.getLogger(__name__)

STATUS_OK = 1


class TradeAPIClient:
    """Implements the TradeAPI protocol over HTTP.

    Authentication is HTTP basic with the API key as the user name and an
    empty password. GET parameters go in the query string, POST parameters
    in a form body. Every response is a JSON envelope::

        {"status": 1, "time": ..., "response": {...},
         "current_page": 1, "total_pages": 3}

    Anything but ``status == 1`` raises APIStatusError with the API message.
    A body that cannot be decoded into offers or items raises TransportError.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            auth=httpx.BasicAuth(self._api_key, ""),
            timeout=httpx.Timeout(self._timeout, connect=10),
            transport=self._transport,
        )

    async def call(self, request: ApiRequest) -> dict[str, Any]:
        """Execute a request descriptor and return the decoded envelope."""
        log.debug("%s %s %s", request.method, request.path, request.params)
        try:
            async with self._client() as client:
                if request.method == "GET":
                    resp = await client.get(request.path, params=request.params)
                else:
                    resp = await client.post(request.path, data=request.params)
        except httpx.TimeoutException as exc:
            raise TransportError(f"{request.path} timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{request.path} failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(
                f"{request.path} returned HTTP {resp.status_code} with a non-JSON body"
            ) from exc

        if not isinstance(data, dict):
            raise TransportError(f"{request.path} returned an unexpected body")

        status = data.get("status")
        if status != STATUS_OK:
            message = data.get("message") or f"HTTP {resp.status_code}"
            log.warning("%s returned status %s: %s", request.path, status, message)
            raise APIStatusError(message, status=status, http_status=resp.status_code)

        return data

    # ── Offers ─────────────────────────────────────────────

    async def get_offers(
        self, page: int = 1, state: OfferState | None = None, per_page: int | None = None,
    ) -> OfferPage:
        request = endpoints.get_offers(page, state=state, per_page=per_page)
        data = await self.call(request)
        try:
            offers = [Offer.from_api(o) for o in _response(data).get("offers", [])]
            return OfferPage(
                offers=offers,
                current_page=int(data.get("current_page") or page),
                total_pages=int(data.get("total_pages") or 1),
            )
        except _DECODE_ERRORS as exc:
            raise _malformed(request, "offer listing", exc) from exc

    async def get_offer(self, offer_id: OfferId) -> Offer:
        request = endpoints.get_offer(offer_id)
        return _offer(request, await self.call(request))

    async def send_offer(
        self,
        partner: int | str,
        items: Sequence[int],
        twofactor_code: str,
        message: str = "",
        token: str | None = None,
    ) -> Offer:
        if isinstance(partner, int):
            if not token:
                raise TradeOfferError("Sending to a uid requires the partner's trade token")
            request = endpoints.send_offer(partner, token, items, twofactor_code, message)
        else:
            request = endpoints.send_offer_to_steam_id(partner, items, twofactor_code, message)
        offer = _offer(request, await self.call(request))
        log.info("Sent offer #%s to %s (%d items)", offer.id, partner, len(items))
        return offer

    async def accept_offer(self, offer_id: OfferId, twofactor_code: str) -> Offer:
        request = endpoints.accept_offer(offer_id, twofactor_code)
        offer = _offer(request, await self.call(request))
        log.info("Accepted offer #%s", offer_id)
        return offer

    async def cancel_offer(self, offer_id: OfferId) -> Offer:
        request = endpoints.cancel_offer(offer_id)
        offer = _offer(request, await self.call(request))
        log.info("Canceled offer #%s", offer_id)
        return offer

    # ── Inventory ──────────────────────────────────────────

    async def get_inventory(
        self, page: int = 1, app_id: int | None = None, per_page: int | None = None,
    ) -> InventoryPage:
        request = endpoints.get_inventory(page, app_id=app_id, per_page=per_page)
        return _inventory_page(request, await self.call(request), page)

    async def get_user_inventory(
        self, user: int | str, app_id: int | None = None, page: int = 1,
    ) -> InventoryPage:
        if isinstance(user, int):
            request = endpoints.get_user_inventory(user, app_id=app_id, page=page)
        else:
            request = endpoints.get_user_inventory_from_steam_id(user, app_id=app_id, page=page)
        return _inventory_page(request, await self.call(request), page)


# Raised while decoding a well-formed envelope whose payload has the wrong shape.
_DECODE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


def _malformed(request: ApiRequest, what: str, exc: Exception) -> TransportError:
    log.warning("%s returned a malformed %s: %r", request.path, what, exc)
    return TransportError(f"{request.path} returned a malformed {what}: {exc!r}")


def _response(data: dict[str, Any]) -> dict[str, Any]:
    return data.get("response") or {}


def _offer(request: ApiRequest, data: dict[str, Any]) -> Offer:
    try:
        raw = _response(data).get("offer")
        if not raw:
            raise APIStatusError("response did not contain an offer", status=data.get("status"))
        return Offer.from_api(raw)
    except _DECODE_ERRORS as exc:
        raise _malformed(request, "offer", exc) from exc


def _inventory_page(request: ApiRequest, data: dict[str, Any], page: int) -> InventoryPage:
    try:
        return InventoryPage(
            items=list(_response(data).get("items", [])),
            current_page=int(data.get("current_page") or page),
            total_pages=int(data.get("total_pages") or 1),
        )
    except _DECODE_ERRORS as exc:
        raise _malformed(request, "inventory page", exc) from exc
