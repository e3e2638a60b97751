"""
Stream Player - Main Entry Point

Runs one headless player session: plays the given tracks in order on a
Qt event loop and exits when the queue is exhausted.
"""

import argparse
import json
import logging
import os
import signal
import sys
from pathlib import Path

# Add src to path
src_path = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, src_path)

from PyQt6.QtCore import QCoreApplication

logger = logging.getLogger(__name__)


def _track_from_source(source: str):
    from models.track import Track

    name = Path(source.rstrip("/")).stem or source
    return Track(id=source, title=name, audio_source_uri=source)


def load_tracks(args: argparse.Namespace) -> list:
    """Build Track descriptors from a JSON catalog file and/or plain locators"""
    from models.track import Track

    tracks = []
    if args.tracks_json:
        with open(args.tracks_json, "r", encoding="utf-8") as f:
            documents = json.load(f)
        tracks.extend(Track.from_dict(doc) for doc in documents)
    tracks.extend(_track_from_source(source) for source in args.sources)
    return tracks


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Play audio files or stream URLs through one player session.",
    )
    parser.add_argument("sources", nargs="*", help="Audio file paths or URIs, played in order")
    parser.add_argument("--tracks-json", help="JSON list of track documents (id, title, artist, audioUrl, ...)")
    parser.add_argument("--config", default="config/default_config.yaml", help="Configuration file path")
    parser.add_argument("--backend", choices=["vlc", "pygame"], help="Media backend (overrides audio.backend)")
    parser.add_argument("--volume", type=int, help="Initial volume percent (0-100)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser


def main(argv=None) -> int:
    """Application entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tracks = load_tracks(args)
    if not tracks:
        logger.error("Nothing to play")
        return 2

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName("Stream Player")
    app.setApplicationVersion("1.0.0")

    from app.container_factory import AppContainerFactory
    from app.events import EventType
    from app.playback_pump import PlaybackPump
    from core.ports.audio import MediaErrorKind

    try:
        container = AppContainerFactory.create(config_path=args.config, backend=args.backend)
    except RuntimeError as e:
        logger.error("%s", e)
        return 1

    player = container.player
    if args.volume is not None:
        player.set_volume(args.volume)

    container.event_bus.subscribe(EventType.PLAYBACK_STOPPED, lambda _data: app.quit())

    def on_error(data):
        # Unattended session: an unplayable source would otherwise stall the run
        if data.get("kind") is MediaErrorKind.LOAD_FAILURE:
            player.next_track()

    container.event_bus.subscribe(EventType.ERROR_OCCURRED, on_error)

    pump = PlaybackPump(
        container.media_output,
        interval_ms=container.config.get("playback.poll_interval_ms", PlaybackPump.DEFAULT_INTERVAL_MS),
    )

    signal.signal(signal.SIGINT, lambda *_: app.quit())

    for track in tracks:
        player.enqueue(track)
    player.next_track()
    pump.start()

    try:
        return app.exec()
    finally:
        pump.stop()
        container.cleanup()


if __name__ == "__main__":
    sys.exit(main())
