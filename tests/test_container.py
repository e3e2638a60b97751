"""
Composition root tests: one isolated player session per container.
"""

from __future__ import annotations

import pytest

from conftest import FakeMediaOutput


@pytest.fixture
def container():
    from app.container_factory import AppContainerFactory

    container = AppContainerFactory.create_for_testing(media_output=FakeMediaOutput())
    yield container
    container.cleanup()


def test_container_wires_one_player_to_the_output(container):
    from app.protocols import IEventBus, ILikesService, IMediaOutput, IPlayerService

    assert isinstance(container.event_bus, IEventBus)
    assert isinstance(container.player, IPlayerService)
    assert isinstance(container.likes, ILikesService)
    assert isinstance(container.media_output, IMediaOutput)
    assert container.player.volume_percent == 70
    assert ("set_volume", 0.7) in container.media_output.calls


def test_sessions_are_isolated(container, make_track):
    from app.container_factory import AppContainerFactory

    other = AppContainerFactory.create_for_testing(media_output=FakeMediaOutput())
    try:
        container.player.play_track(make_track("a"))

        assert other.player.current_track is None
        assert other.event_bus is not container.event_bus
    finally:
        other.cleanup()


def test_played_tracks_are_recorded(container, make_track):
    container.player.enqueue(make_track("a"))
    container.player.enqueue(make_track("b"))
    container.player.next_track()
    container.media_output.emit_ended()

    assert container.player.current_track.id == "b"
    assert container.play_history.recent_track_ids() == ["b", "a"]


def test_likes_use_session_user(container):
    assert container.likes.user_id == "local"
    assert container.likes.toggle("a") is True


def test_config_file_is_applied(tmp_path, make_track):
    from app.container_factory import AppContainerFactory

    config_path = tmp_path / "session.yaml"
    config_path.write_text(
        "playback:\n  default_volume: 25\n  restart_threshold_seconds: 10\n",
        encoding="utf-8",
    )
    output = FakeMediaOutput()
    container = AppContainerFactory.create_for_testing(media_output=output, config_path=str(config_path))
    try:
        player = container.player
        player.play_track(make_track())
        output.set_position(8)
        player.prev_track()

        assert player.volume_percent == 25
        assert "seek" not in output.command_names()
    finally:
        container.cleanup()


def test_cleanup_releases_session(make_track):
    from app.container_factory import AppContainerFactory
    from app.events import EventType

    output = FakeMediaOutput()
    container = AppContainerFactory.create_for_testing(media_output=output)
    container.player.play_track(make_track())

    container.cleanup()

    assert container.player.current_track is None
    assert output._listeners == []
    assert container.event_bus.subscriber_count(EventType.TRACK_STARTED) == 0


def test_create_raises_when_no_backend(tmp_path, monkeypatch):
    from app.container_factory import AppContainerFactory
    from core.engine_factory import MediaOutputFactory

    config_path = tmp_path / "session.yaml"
    config_path.write_text(
        f"storage:\n  db_path: {tmp_path / 'player.db'}\n",
        encoding="utf-8",
    )

    def no_backend(_backend):
        raise RuntimeError("No media backends available.")

    monkeypatch.setattr(MediaOutputFactory, "create", no_backend)

    with pytest.raises(RuntimeError):
        AppContainerFactory.create(config_path=str(config_path))
