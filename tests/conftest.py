"""Pytest configuration and shared fixtures."""

import asyncio

import pytest
import pytest_asyncio

from banana_studio.config import StudioConfig
from banana_studio.exceptions import AuthDialogError
from banana_studio.models import (
    GenerationRecord,
    ImageGenerationParameters,
    VideoGenerationParameters,
)
from banana_studio.services import BoundedRecordStore


@pytest.fixture
def test_config(tmp_path):
    """Provide a test configuration with a temporary history database."""
    return StudioConfig(
        history_db_path=tmp_path / "history.db",
        max_image_history=100,
        max_video_history=100,
        api_key="test-key",
        interactive_auth=True,
    )


@pytest_asyncio.fixture
async def image_store(tmp_path):
    """Provide an open image history store backed by a temporary database."""
    store = BoundedRecordStore(
        tmp_path / "history.db", "history", ImageGenerationParameters, kind="image"
    )
    await store.open()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def video_store(tmp_path):
    """Provide an open video history store sharing the temporary database."""
    store = BoundedRecordStore(
        tmp_path / "history.db", "video_history", VideoGenerationParameters, kind="video"
    )
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def make_image_record():
    """Factory fixture for creating image records with sensible defaults."""

    def _make(
        record_id="rec-1",
        created_at=1.0,
        prompt="a banana on the moon",
        artifact_reference="https://example.test/banana.png",
        **param_overrides,
    ):
        return GenerationRecord(
            id=record_id,
            kind="image",
            artifact_reference=artifact_reference,
            prompt_text=prompt,
            parameters=ImageGenerationParameters(prompt=prompt, **param_overrides),
            created_at=created_at,
        )

    return _make


class FakeGenerator:
    """RemoteGenerator stand-in that records calls and can be held open.

    Set ``error`` to make calls fail. Clear ``release`` to keep calls
    pending until the test sets it again.
    """

    def __init__(self, result="https://example.test/out.png"):
        self.result = result
        self.error: Exception | None = None
        self.release = asyncio.Event()
        self.release.set()
        self.image_calls: list[tuple] = []
        self.video_calls: list[tuple] = []

    @property
    def call_count(self) -> int:
        return len(self.image_calls) + len(self.video_calls)

    async def _resolve(self):
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result

    async def generate_image(self, config, reference_images=None):
        self.image_calls.append((config, reference_images))
        return await self._resolve()

    async def generate_video(self, config, first_frame=None, last_frame=None):
        self.video_calls.append((config, first_frame, last_frame))
        return await self._resolve()


class FakeGate:
    """AuthorizationGate stand-in recording authorization requests."""

    def __init__(self, authorized=True, interactive=True, dialog_fails=False):
        self.authorized = authorized
        self.interactive = interactive
        self.dialog_fails = dialog_fails
        self.requests = 0
        self.history: list[bool] = []

    def is_authorized(self) -> bool:
        return self.authorized

    def set_authorized(self, value: bool) -> None:
        self.history.append(value)
        self.authorized = value

    async def request_authorization(self) -> None:
        self.requests += 1
        if self.dialog_fails:
            raise AuthDialogError("dialog closed")


class RecordingObserver:
    """A real SessionObserver that records every notification."""

    def __init__(self):
        self.events: list[tuple] = []

    def on_state_changed(self, mode, state):
        self.events.append((mode, state))

    @property
    def phases(self):
        return [state.phase for _, state in self.events]


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def fake_gate():
    return FakeGate()


@pytest.fixture
def recording_observer():
    return RecordingObserver()


@pytest.fixture
def make_gate():
    """Factory fixture for gates with a chosen authorization setup."""

    def _make(authorized=True, interactive=True, dialog_fails=False):
        return FakeGate(authorized=authorized, interactive=interactive, dialog_fails=dialog_fails)

    return _make
