"""Request descriptors for every trade API endpoint the manager calls.

Each builder returns an ApiRequest value; the client turns it into an HTTP
request. Keeping endpoints as data means the interface/method/version triple
lives in one place and tests can assert on it directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from trade_offer_manager.models.offers import OfferId, OfferState

HttpMethod = Literal["GET", "POST"]


@dataclass(frozen=True)
class ApiRequest:
    """A single call against the WebAPI: ``/{interface}/{name}/v{version}/``."""

    method: HttpMethod
    interface: str
    name: str
    version: int = 1
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return f"/{self.interface}/{self.name}/v{self.version}/"


def _drop_none(params: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def _join_items(items: Sequence[int]) -> str:
    return ",".join(str(i) for i in items)


# ── ITrade ─────────────────────────────────────────────


def get_offers(
    page: int = 1,
    state: OfferState | None = None,
    per_page: int | None = None,
    offer_type: str | None = None,
) -> ApiRequest:
    """List offers. ``offer_type`` is "sent" or "received"."""
    return ApiRequest(
        "GET", "ITrade", "GetOffers",
        params=_drop_none({
            "page": page,
            "per_page": per_page,
            "state": int(state) if state is not None else None,
            "type": offer_type,
        }),
    )


def get_offer(offer_id: OfferId) -> ApiRequest:
    return ApiRequest("GET", "ITrade", "GetOffer", params={"offer_id": offer_id})


def send_offer(
    uid: int,
    token: str,
    items: Sequence[int],
    twofactor_code: str,
    message: str = "",
) -> ApiRequest:
    return ApiRequest(
        "POST", "ITrade", "SendOffer",
        params={
            "uid": uid,
            "token": token,
            "twofactor_code": twofactor_code,
            "items": _join_items(items),
            "message": message,
        },
    )


def send_offer_to_steam_id(
    steam_id: str,
    items: Sequence[int],
    twofactor_code: str,
    message: str = "",
) -> ApiRequest:
    return ApiRequest(
        "POST", "ITrade", "SendOfferToSteamId",
        params={
            "steam_id": steam_id,
            "twofactor_code": twofactor_code,
            "items": _join_items(items),
            "message": message,
        },
    )


def accept_offer(offer_id: OfferId, twofactor_code: str) -> ApiRequest:
    return ApiRequest(
        "POST", "ITrade", "AcceptOffer",
        params={"offer_id": offer_id, "twofactor_code": twofactor_code},
    )


def cancel_offer(offer_id: OfferId) -> ApiRequest:
    return ApiRequest("POST", "ITrade", "CancelOffer", params={"offer_id": offer_id})


def get_user_inventory(
    uid: int, app_id: int | None = None, page: int = 1,
) -> ApiRequest:
    return ApiRequest(
        "GET", "ITrade", "GetUserInventory",
        params=_drop_none({"uid": uid, "app_id": app_id, "page": page}),
    )


def get_user_inventory_from_steam_id(
    steam_id: str, app_id: int | None = None, page: int = 1,
) -> ApiRequest:
    return ApiRequest(
        "GET", "ITrade", "GetUserInventoryFromSteamId",
        params=_drop_none({"steam_id": steam_id, "app_id": app_id, "page": page}),
    )


# ── IUser ──────────────────────────────────────────────


def get_inventory(
    page: int = 1, app_id: int | None = None, per_page: int | None = None,
) -> ApiRequest:
    return ApiRequest(
        "GET", "IUser", "GetInventory",
        params=_drop_none({"page": page, "app_id": app_id, "per_page": per_page}),
    )
