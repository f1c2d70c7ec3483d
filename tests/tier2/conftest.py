"""Tier 2 fixtures: a local aiohttp server speaking the trade API envelope."""

from __future__ import annotations

import base64

import pytest
from aiohttp import web

from trade_offer_manager.api.client import TradeAPIClient
from trade_offer_manager.manager import TradeOfferManager

from tests.conftest import TEST_API_KEY, make_test_config
from tests.factories import make_api_offer


class FakeTradeServer:
    """In-memory trade API. Lists offers newest update first, ``per_page`` per page."""

    def __init__(self, api_key: str = TEST_API_KEY, per_page: int = 2) -> None:
        self.api_key = api_key
        self.per_page = per_page
        self.offers: dict[int, dict] = {}
        self.requests: list[tuple[str, str, dict]] = []
        self.fail_next: tuple[int, str] | None = None

    def put(self, *offers: dict) -> None:
        for offer in offers:
            self.offers[offer["id"]] = offer

    def _authorized(self, request: web.Request) -> bool:
        expected = base64.b64encode(f"{self.api_key}:".encode()).decode()
        return request.headers.get("Authorization") == f"Basic {expected}"

    @staticmethod
    def _ok(response: dict, **extra) -> web.Response:
        return web.json_response({"status": 1, "time": 0, "response": response, **extra})

    @staticmethod
    def _error(status: int, message: str) -> web.Response:
        return web.json_response({"status": status, "message": message}, status=status)

    @web.middleware
    async def middleware(self, request: web.Request, handler):
        params = dict(request.query)
        if request.method == "POST":
            params.update(await request.post())
        self.requests.append((request.method, request.path, params))
        if not self._authorized(request):
            return self._error(401, "Invalid API key")
        if self.fail_next is not None:
            status, message = self.fail_next
            self.fail_next = None
            return self._error(status, message)
        return await handler(request)

    async def get_offers(self, request: web.Request) -> web.Response:
        page = int(request.query.get("page", 1))
        size = int(request.query.get("per_page", self.per_page))
        listing = sorted(self.offers.values(), key=lambda o: o["time_updated"], reverse=True)
        total_pages = max(1, -(-len(listing) // size))
        start = (page - 1) * size
        return self._ok(
            {"offers": listing[start:start + size]},
            current_page=page,
            total_pages=total_pages,
        )

    async def get_offer(self, request: web.Request) -> web.Response:
        offer = self.offers.get(int(request.query["offer_id"]))
        if offer is None:
            return self._error(404, "Offer not found")
        return self._ok({"offer": offer})

    async def cancel_offer(self, request: web.Request) -> web.Response:
        data = await request.post()
        offer = self.offers.get(int(data["offer_id"]))
        if offer is None:
            return self._error(404, "Offer not found")
        offer = {**offer, "state": 6}
        return self._ok({"offer": offer})

    async def send_offer_to_steam_id(self, request: web.Request) -> web.Response:
        data = await request.post()
        offer = make_api_offer(
            id=9000 + len(self.offers), sent_by_you=True,
            time_created=1_700_000_000, message=data.get("message", ""),
        )
        self.put(offer)
        return self._ok({"offer": offer})

    def app(self) -> web.Application:
        app = web.Application(middlewares=[self.middleware])
        app.router.add_get("/ITrade/GetOffers/v1/", self.get_offers)
        app.router.add_get("/ITrade/GetOffer/v1/", self.get_offer)
        app.router.add_post("/ITrade/CancelOffer/v1/", self.cancel_offer)
        app.router.add_post("/ITrade/SendOfferToSteamId/v1/", self.send_offer_to_steam_id)
        return app


@pytest.fixture
def trade_server():
    return FakeTradeServer()


@pytest.fixture
async def server_url(trade_server):
    """Start the fake trade API on a free local port and return its base URL."""
    runner = web.AppRunner(trade_server.app())
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    yield f"http://{host}:{port}"
    await runner.cleanup()


@pytest.fixture
def live_client(server_url):
    return TradeAPIClient(TEST_API_KEY, server_url, timeout=5.0)


@pytest.fixture
def live_manager(server_url, code_source, sink, clock, wall_clock):
    """TradeOfferManager whose HTTP client talks to the local server."""
    cfg = make_test_config(api_url=server_url)
    return TradeOfferManager(
        cfg, code_source=code_source, events=sink, clock=clock, wall_clock=wall_clock,
    )
