from __future__ import annotations

import asyncio
import os
import socket
import sys
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.constants import NotificationType  # noqa: E402
from config.settings import Settings, load_settings  # noqa: E402


WEBHOOK = "https://hooks.example.com/honeypot"


class RecordingNotifier:
    """Stands in for WebhookNotifier; keeps every payload it is handed."""

    def __init__(self) -> None:
        self.payloads: list[Any] = []

    def send(self, payload: Any) -> None:
        self.payloads.append(payload)

    def of_type(self, kind: NotificationType) -> list[Any]:
        return [p for p in self.payloads if p.type == kind]


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


async def wait_for(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    """Poll ``predicate`` on the running loop until it holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Clean sensor environment with WEBHOOK_URL and HOST_NAME set."""
    for key in list(os.environ):
        if key.upper().startswith("HONEYPOT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("WEBHOOK_URL", WEBHOOK)
    monkeypatch.setenv("HOST_NAME", "sensor-test")
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def make_settings(env: pytest.MonkeyPatch) -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        overrides.setdefault("bind_host", "127.0.0.1")
        return load_settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def blocked_port() -> Iterator[int]:
    """A loopback port held by a plain listening socket."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    s.listen(1)
    try:
        yield s.getsockname()[1]
    finally:
        s.close()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    sink_id = logger.add(lambda m: messages.append(str(m)), format="{message}", level="DEBUG")
    try:
        yield messages
    finally:
        try:
            logger.remove(sink_id)
        except ValueError:
            # setup_logging() already dropped every sink
            pass
