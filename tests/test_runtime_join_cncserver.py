import httpx
import pytest

from modebridge.config.schema import CncServerConfig
from modebridge.runtime.cncserver import BotProfile, CncServerClient, api_server_url
from modebridge.runtime.join import BootJoin
from modebridge.settings.backends import MemoryBackend
from modebridge.settings.store import AppSettings
from modebridge.utils.exceptions import CncServerError

BOT = {
    "name": "WaterColorBot",
    "type": "watercolorbot",
    "maxArea": {"width": 12420, "height": 7350},
    "workArea": {"left": 1200, "top": 0},
}


@pytest.mark.parametrize("order", [["bot", "paper"], ["paper", "bot"]])
def test_boot_join_fires_once_in_any_order(order):
    fired = []
    join = BootJoin(["bot", "paper"], lambda: fired.append(True))
    join.resolve(order[0])
    assert fired == []
    join.resolve(order[1])
    join.resolve(order[1])
    join.check()
    assert fired == [True]


def test_boot_join_ignores_unknown_names():
    fired = []
    join = BootJoin(["bot"], lambda: fired.append(True))
    join.resolve("paper")
    assert fired == []
    join.resolve("bot")
    assert fired == [True]


def test_api_server_url_uses_httpport_setting():
    app = AppSettings(MemoryBackend({"robopaint-settings": '{"httpport": "4343"}'}))
    app.reload()
    assert api_server_url(CncServerConfig()) == "http://localhost:4242"
    assert api_server_url(CncServerConfig(), app) == "http://localhost:4343"


def test_bot_profile_canvas():
    bot = BotProfile.from_payload(BOT)
    canvas = bot.canvas()
    assert bot.name == "WaterColorBot"
    assert (canvas.width, canvas.height) == (11220, 7350)
    assert BotProfile.from_payload(None).canvas().width == 0


@pytest.mark.asyncio
async def test_fetch_bot_hits_versioned_endpoint():
    requested = []

    def _handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=BOT)

    async with httpx.AsyncClient(transport=httpx.MockTransport(_handler)) as http:
        client = CncServerClient(CncServerConfig(port=4242, version="1"), http_client=http)
        bot = await client.fetch_bot()
        await client.close()
        assert not http.is_closed

    assert requested == ["http://localhost:4242/v1/settings/bot"]
    assert bot.type == "watercolorbot"


@pytest.mark.asyncio
async def test_fetch_bot_http_error_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "down"}))
    async with httpx.AsyncClient(transport=transport) as http:
        client = CncServerClient(CncServerConfig(), http_client=http)
        with pytest.raises(CncServerError):
            await client.fetch_bot()
