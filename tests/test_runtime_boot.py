import json

import httpx
import pytest

from modebridge.ipc.transport import LocalTransport
from modebridge.lifecycle.coordinator import ModeState
from modebridge.runtime.boot import boot_mode
from modebridge.runtime.cncserver import Canvas
from modebridge.settings.backends import MemoryBackend
from modebridge.utils.exceptions import ModeLoadError

BOT = {"name": "AxiDraw", "type": "axidraw", "maxArea": {"width": 12000, "height": 8000}, "workArea": {"left": 0, "top": 0}}

ENTRY = """
EVENTS = []


def setup(api):
    api.events = EVENTS

    def bind_controls():
        EVENTS.append("bind")
        api.settings.manage(["#speed", "#pen", "#fill"])

    def on_close(ack):
        api.full_cancel(api.t("start"))
        ack()

    return {
        "bind_controls": bind_controls,
        "page_init_ready": lambda: EVENTS.append("ready"),
        "translate_complete": lambda: EVENTS.append("translated"),
        "on_close": on_close,
    }
"""


def _http(status=200, payload=BOT):
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(status, json=payload)))


@pytest.mark.asyncio
async def test_boot_runs_hooks_in_order_and_binds_settings(make_mode, config):
    mode_dir = make_mode("draw", entry_source=ENTRY)
    transport = LocalTransport()
    backend = MemoryBackend()

    async with _http() as http:
        context = await boot_mode(mode_dir, config, transport, backend=backend, http_client=http)

    assert context.api.events == ["translated", "bind", "ready"]
    assert context.coordinator.state is ModeState.READY
    assert [(f.channel, f.args) for f in transport.sent] == [("cncserver-run", [["clear", "resume"]])]
    assert context.document.select("h1")[0].get_text() == "Draw mode"
    assert json.loads(backend.get("draw-settings")) == {"speed": "50", "pen": "fine", "fill": "none"}
    assert context.canvas == Canvas(width=12000, height=8000)
    assert context.svg.canvas_size == context.canvas


@pytest.mark.asyncio
async def test_close_through_mode_hook(make_mode, config):
    transport = LocalTransport()
    async with _http() as http:
        context = await boot_mode(
            make_mode("draw", entry_source=ENTRY), config, transport, backend=MemoryBackend(), http_client=http
        )

    transport.emit("globalclose")
    cancel, close = transport.sent[-2:]
    assert cancel.channel == "cncserver-run"
    assert cancel.args[0][3] == ["status", "Go", True]
    assert cancel.args[1] is True
    assert (close.channel, close.args) == ("globalclose", [])
    assert context.coordinator.state is ModeState.TERMINAL


@pytest.mark.asyncio
async def test_paper_dependency_gates_ready(make_mode, config):
    transport = LocalTransport()
    loads = []

    def _loader(descriptor, name, done):
        loads.append((descriptor.name, name, done))

    async with _http() as http:
        context = await boot_mode(
            make_mode("draw", dependencies=["paper"]),
            config,
            transport,
            backend=MemoryBackend(),
            library_loader=_loader,
            http_client=http,
        )

    assert [(mode, lib) for mode, lib, _ in loads] == [("draw", "paper")]
    assert context.coordinator.state is ModeState.INITIALIZING
    assert transport.sent == []

    loads[0][2]()
    assert context.coordinator.state is ModeState.READY
    assert len(transport.sent_on("cncserver-run")) == 1


@pytest.mark.asyncio
async def test_bot_profile_failure_still_boots(make_mode, config):
    async with _http(status=503, payload={}) as http:
        context = await boot_mode(make_mode("draw"), config, LocalTransport(), backend=MemoryBackend(), http_client=http)
    assert context.coordinator.state is ModeState.READY
    assert context.bot is None
    assert context.canvas is None


@pytest.mark.asyncio
async def test_stored_language_and_lang_change(make_mode, config):
    mode_dir = make_mode(
        "draw",
        translations={
            "en-US.json": {"_meta": {"target": "en-US"}, "title": "Draw mode"},
            "de-DE.json": {"_meta": {"target": "de-DE"}, "title": "Zeichnen"},
        },
    )
    backend = MemoryBackend({"robopaint-lang": "de-DE"})
    transport = LocalTransport()
    async with _http() as http:
        context = await boot_mode(mode_dir, config, transport, backend=backend, http_client=http)

    heading = context.document.select("h1")[0]
    assert heading.get_text() == "Zeichnen"

    backend.set("robopaint-lang", "en-US")
    transport.emit("cncserver", "langChange", "en-US")
    assert heading.get_text() == "Draw mode"
    assert context.api.t("title") == "Draw mode"
    assert context.api.global_t("common.hello") == "Hi"


@pytest.mark.asyncio
async def test_broken_package_aborts_boot(tmp_path, config):
    (tmp_path / "package.json").write_text("{", encoding="utf-8")
    (tmp_path / "index.html").write_text("<html></html>", encoding="utf-8")
    with pytest.raises(ModeLoadError):
        await boot_mode(tmp_path, config, LocalTransport(), backend=MemoryBackend())
