import asyncio
import random

import pytest
import pytest_asyncio

from elite_media_player.application.interfaces.media_engine import MediaEngine

# ============================================================================
# Media Engine Double
# ============================================================================


class FakeMediaEngine(MediaEngine):
    """Engine whose loads stay pending until the test resolves or fails them."""

    def __init__(self) -> None:
        self.pending: dict[str, asyncio.Future[float]] = {}
        self.loaded_urls: list[str] = []
        self.calls: list[tuple] = []
        self.on_tick = None
        self.on_completed = None

    async def load(self, url: str) -> float:
        future: asyncio.Future[float] = asyncio.get_running_loop().create_future()
        self.pending[url] = future
        self.loaded_urls.append(url)
        return await future

    def play(self) -> None:
        self.calls.append(("play",))

    def pause(self) -> None:
        self.calls.append(("pause",))

    def seek(self, time: float) -> None:
        self.calls.append(("seek", time))

    def set_on_position_tick(self, callback) -> None:
        self.on_tick = callback

    def set_on_completed(self, callback) -> None:
        self.on_completed = callback

    # -- test controls --

    def resolve(self, url: str, duration: float) -> None:
        future = self.pending.pop(url)
        if not future.done():
            future.set_result(duration)

    def fail(self, url: str, error: BaseException) -> None:
        future = self.pending.pop(url)
        if not future.done():
            future.set_exception(error)

    def emit_tick(self, time: float) -> None:
        assert self.on_tick is not None
        self.on_tick(time)

    def emit_completed(self) -> None:
        assert self.on_completed is not None
        self.on_completed()

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


async def settle(rounds: int = 5) -> None:
    """Let scheduled callbacks and load tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def load_and_play(session, engine: FakeMediaEngine, track, duration: float | None = None):
    """Select a track and resolve its load so the session ends up playing."""
    assert session.select_track(track)
    await settle()
    engine.resolve(track.source_url, track.duration_seconds if duration is None else duration)
    await settle()


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def sample_track():
    """Create a sample track for testing."""
    from elite_media_player.domain.music.entities import Track
    from elite_media_player.domain.music.value_objects import TrackId

    return Track(
        id=TrackId("test-track-123"),
        title="Test Track",
        artist="Test Artist",
        duration_seconds=180.0,
        artwork="test-artwork",
        source_url="https://example.com/test.mp3",
    )


@pytest.fixture
def catalog():
    """Five tracks, mirroring the demo catalog the player ships with."""
    from elite_media_player.domain.music.entities import Track

    rows = [
        ("1", "Blinding Lights", "The Weeknd", 203),
        ("2", "Save Your Tears", "The Weeknd", 215),
        ("3", "Starboy", "The Weeknd ft. Daft Punk", 230),
        ("4", "Levitating", "Dua Lipa", 220),
        ("5", "Don't Start Now", "Dua Lipa", 183),
    ]
    return [
        Track(
            id=track_id,
            title=title,
            artist=artist,
            duration_seconds=duration,
            source_url=f"https://example.com/track{track_id}.mp3",
        )
        for track_id, title, artist, duration in rows
    ]


@pytest.fixture
def engine():
    return FakeMediaEngine()


@pytest_asyncio.fixture
async def session(engine, catalog):
    """A started session over the five-track catalog."""
    from elite_media_player.application.services.playback_session import PlaybackSession

    playback_session = PlaybackSession(engine=engine, rng=random.Random(1234))
    playback_session.start(catalog)
    yield playback_session
    playback_session.close()
