"""Client for the cncserver HTTP API: locate the server, read the bot profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from modebridge.config.schema import CncServerConfig
from modebridge.settings.store import AppSettings
from modebridge.utils.exceptions import CncServerError
from modebridge.utils.helpers import safe_dict


@dataclass(slots=True)
class Canvas:
    """Drawing surface size in cncserver steps."""

    width: int
    height: int


@dataclass(slots=True)
class BotProfile:
    """What cncserver reports about the attached bot."""

    name: str = ""
    type: str = ""
    max_area: dict[str, int] = field(default_factory=dict)
    work_area: dict[str, int] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "BotProfile":
        data = safe_dict(payload)
        return cls(
            name=str(data.get("name") or ""),
            type=str(data.get("type") or ""),
            max_area={k: _as_int(v) for k, v in safe_dict(data.get("maxArea")).items()},
            work_area={k: _as_int(v) for k, v in safe_dict(data.get("workArea")).items()},
            raw=data,
        )

    def canvas(self) -> Canvas:
        """
        The usable drawing area: the maximum area less the work area offset.

        A bot that reports no maximum area yields a zero canvas.
        """
        width = self.max_area.get("width", 0) - self.work_area.get("left", 0)
        height = self.max_area.get("height", 0) - self.work_area.get("top", 0)
        return Canvas(width=max(width, 0), height=max(height, 0))


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def api_server_url(config: CncServerConfig, app_settings: AppSettings | None = None) -> str:
    """Base URL of the cncserver API; the app's ``httpport`` setting overrides the configured port."""
    port = config.port
    if app_settings is not None:
        override = app_settings.get("httpport")
        if override not in (None, ""):
            try:
                port = int(override)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid httpport setting {!r}", override)
    return f"{config.protocol}://{config.domain}:{port}"


class CncServerClient:
    """Async cncserver API wrapper; only the read-only calls a mode needs at boot."""

    def __init__(
        self,
        config: CncServerConfig,
        app_settings: AppSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.app_settings = app_settings
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def server(self) -> str:
        return api_server_url(self.config, self.app_settings)

    def _url(self, path: str) -> str:
        return f"{self.server}/v{self.config.version}/{path.lstrip('/')}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_json(self, path: str) -> Any:
        client = await self._get_client()
        url = self._url(path)
        try:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise CncServerError(f"cncserver request failed: {url}: {e}", url=url) from e
        except ValueError as e:
            raise CncServerError(f"cncserver returned invalid JSON: {url}", url=url) from e

    async def fetch_bot(self) -> BotProfile:
        payload = await self.get_json("settings/bot")
        bot = BotProfile.from_payload(payload)
        logger.debug("cncserver bot profile: {} ({})", bot.name or "unnamed", bot.type or "unknown type")
        return bot
