"""
Core Module Tests
"""

import threading

import pytest


class TestEventBus:
    """Event Bus Tests"""

    def setup_method(self):
        from core.event_bus import EventBus
        self.bus = EventBus()

    def teardown_method(self):
        self.bus.clear()

    def test_instances_are_independent(self):
        """Each session gets its own bus."""
        from core.event_bus import EventBus, EventType

        other = EventBus()
        received = []
        other.subscribe(EventType.TRACK_STARTED, received.append)

        self.bus.publish_sync(EventType.TRACK_STARTED, "x")

        assert received == []

    def test_subscribe_and_publish(self):
        """Test subscription and publication."""
        from core.event_bus import EventType

        received_data = []
        self.bus.subscribe(EventType.TRACK_STARTED, received_data.append)
        self.bus.publish_sync(EventType.TRACK_STARTED, {"title": "Test Song"})

        assert len(received_data) == 1
        assert received_data[0]["title"] == "Test Song"

    def test_unsubscribe(self):
        """Test unsubscription."""
        from core.event_bus import EventType

        received_data = []
        sub_id = self.bus.subscribe(EventType.TRACK_STARTED, received_data.append)

        assert self.bus.unsubscribe(sub_id) is True
        assert self.bus.unsubscribe(sub_id) is False
        self.bus.publish_sync(EventType.TRACK_STARTED, {"title": "Test"})

        assert len(received_data) == 0

    def test_subscription_order(self):
        from core.event_bus import EventType

        order = []
        self.bus.subscribe(EventType.STATE_CHANGED, lambda _: order.append(1))
        self.bus.subscribe(EventType.STATE_CHANGED, lambda _: order.append(2))

        self.bus.publish_sync(EventType.STATE_CHANGED)

        assert order == [1, 2]

    def test_callback_error_is_isolated(self):
        """A failing callback does not stop the others."""
        from core.event_bus import EventType

        received = []

        def broken(_data):
            raise RuntimeError("boom")

        self.bus.subscribe(EventType.QUEUE_CHANGED, broken)
        self.bus.subscribe(EventType.QUEUE_CHANGED, received.append)

        assert self.bus.publish_sync(EventType.QUEUE_CHANGED, ()) is True
        assert received == [()]

    def test_callbacks_run_on_publishing_thread(self):
        """Delivery never hops to a worker thread."""
        from core.event_bus import EventType

        threads = []
        self.bus.subscribe(EventType.PLAY_RECORDED, lambda _: threads.append(threading.get_ident()))

        self.bus.publish_sync(EventType.PLAY_RECORDED, "t1")

        assert threads == [threading.get_ident()]
        assert not hasattr(self.bus, "publish")

    def test_subscriber_count_and_clear(self):
        from core.event_bus import EventType

        self.bus.subscribe(EventType.TRACK_ENDED, lambda _: None)
        assert self.bus.subscriber_count(EventType.TRACK_ENDED) == 1

        self.bus.clear()
        assert self.bus.subscriber_count(EventType.TRACK_ENDED) == 0


class TestTrackModel:
    """Track descriptor tests"""

    def test_duration_str(self):
        from models.track import Track

        assert Track(id="1", duration_seconds=185).duration_str == "3:05"
        assert Track(id="2").duration_str == "0:00"

    def test_display_name(self):
        from models.track import Track

        assert Track(id="1", title="Song", artist="Band").display_name == "Band - Song"
        assert Track(id="2", title="Song").display_name == "Song"

    def test_negative_duration_rejected(self):
        from models.track import Track

        with pytest.raises(ValueError):
            Track(id="1", duration_seconds=-1)

    def test_immutable(self):
        from dataclasses import FrozenInstanceError
        from models.track import Track

        track = Track(id="1", title="A")
        with pytest.raises(FrozenInstanceError):
            track.title = "B"

    def test_from_web_document(self):
        from models.track import Track

        track = Track.from_dict({
            "id": 7,
            "title": "Night Drive",
            "artist": "Synth",
            "album": "Roads",
            "duration": 215,
            "audioUrl": "https://cdn.example.com/7.mp3",
            "coverUrl": "",
        })

        assert track.id == "7"
        assert track.duration_seconds == 215
        assert track.audio_source_uri == "https://cdn.example.com/7.mp3"
        assert track.cover_uri is None

    def test_dict_keys_roundtrip(self):
        from models.track import Track

        track = Track(id="1", title="A", audio_source_uri="/music/a.mp3", cover_uri="/c.jpg")
        assert Track.from_dict(track.to_dict()) == track


class TestDatabaseManager:
    """Database Manager Tests"""

    def test_schema_created(self, tmp_path):
        from core.database import DatabaseManager

        db = DatabaseManager(str(tmp_path / "player.db"))
        tables = {
            row["name"]
            for row in db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        db.close()

        assert {"track_likes", "play_history", "track_play_counts"} <= tables

    def test_insert_fetch_delete(self, tmp_path):
        """Test insert, query and delete."""
        from core.database import DatabaseManager

        db = DatabaseManager(str(tmp_path / "player.db"))
        db.execute(
            "INSERT INTO track_likes(user_id, track_id) VALUES(?, ?)",
            ("u1", "t1"),
        )

        row = db.fetch_one("SELECT track_id FROM track_likes WHERE user_id = ?", ("u1",))
        assert row == {"track_id": "t1"}

        assert db.delete("track_likes", "user_id = ?", ("u1",)) == 1
        assert db.fetch_all("SELECT * FROM track_likes") == []
        db.close()

    def test_transaction_rolls_back_on_exception(self, tmp_path):
        from core.database import DatabaseManager

        db = DatabaseManager(str(tmp_path / "player.db"))

        with pytest.raises(RuntimeError):
            with db.transaction():
                db.execute(
                    "INSERT INTO play_history(user_id, track_id) VALUES(?, ?)",
                    ("u1", "t1"),
                )
                raise RuntimeError("boom")

        assert db.fetch_all("SELECT * FROM play_history") == []
        db.close()

    def test_transaction_commits_on_success(self, tmp_path):
        from core.database import DatabaseManager

        path = str(tmp_path / "player.db")
        db = DatabaseManager(path)
        with db.transaction():
            db.execute(
                "INSERT INTO play_history(user_id, track_id) VALUES(?, ?)",
                ("u1", "t1"),
            )
        db.close()

        reopened = DatabaseManager(path)
        assert len(reopened.fetch_all("SELECT * FROM play_history")) == 1
        reopened.close()

    def test_in_memory(self):
        from core.database import DatabaseManager

        db = DatabaseManager(":memory:")
        assert db.db_path == ":memory:"
        assert db.fetch_all("SELECT * FROM track_likes") == []
        db.close()

    def test_write_sql_detection(self):
        from core.database import DatabaseManager

        assert DatabaseManager._is_write_sql("  insert into x values(1)")
        assert DatabaseManager._is_write_sql("DELETE FROM x")
        assert not DatabaseManager._is_write_sql("SELECT * FROM x")
