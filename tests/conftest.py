"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from toastboard.infra.api_client import ToastApiClient
from toastboard.infra.toast_store import ToastStore, get_toast_store
from toastboard.main import app as toast_app
from toastboard.services.renderer import NotificationRenderer, Screen


class ManualTimer:
    """Timer handle driven by ManualScheduler."""

    def __init__(self, due: int, delay: int, callback: Callable[[], object]) -> None:
        self.due = due
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Fake clock: timers only fire when the test advances time."""

    def __init__(self) -> None:
        self.now = 0
        self.timers: list[ManualTimer] = []

    def call_later(self, delay_ms: int, callback: Callable[[], object]) -> ManualTimer:
        timer = ManualTimer(self.now + delay_ms, delay_ms, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [timer for timer in self.timers if not timer.cancelled]

    def advance(self, ms: int) -> None:
        """Run every timer due within the next `ms` milliseconds, in order."""
        target = self.now + ms
        while True:
            due = [timer for timer in self.pending if timer.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def screen() -> Screen:
    return Screen()


@pytest.fixture
def renderer(screen: Screen, scheduler: ManualScheduler) -> NotificationRenderer:
    return NotificationRenderer(screen, scheduler)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "toasts.json"


@pytest.fixture
def store(data_file: Path) -> ToastStore:
    return ToastStore(data_file)


@pytest.fixture
def app(store: ToastStore) -> Generator[FastAPI, None, None]:
    toast_app.dependency_overrides[get_toast_store] = lambda: store
    try:
        yield toast_app
    finally:
        toast_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest_asyncio.fixture
async def api_client(app: FastAPI) -> AsyncGenerator[ToastApiClient, None]:
    """Client sessions talking to the real app in-process."""
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")
    async with http:
        yield ToastApiClient(http)


def sample_toast(**overrides: object) -> dict[str, object]:
    toast: dict[str, object] = {
        "title": "Hi",
        "message": "There",
        "type": "success",
        "position": "top-right",
        "duration": 3000,
        "autoHide": True,
    }
    toast.update(overrides)
    return toast


@pytest.fixture
def make_toast() -> Callable[..., dict[str, object]]:
    return sample_toast
