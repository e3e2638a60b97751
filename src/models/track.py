"""
Track data model
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Track:
    """
    Track descriptor

    Immutable description of a playable item. A track that is queued or
    current is never mutated; use dataclasses.replace() to derive a new one.
    """

    id: str
    title: str = ""
    artist: str = ""
    album: str = ""
    duration_seconds: float = 0
    audio_source_uri: str = ""
    cover_uri: Optional[str] = None

    def __post_init__(self):
        if self.duration_seconds < 0:
            raise ValueError(f"duration_seconds must be non-negative: {self.duration_seconds}")

    @property
    def duration_str(self) -> str:
        """Formatted duration string (m:ss)"""
        total_seconds = int(self.duration_seconds)
        minutes = total_seconds // 60
        seconds = total_seconds % 60
        return f"{minutes}:{seconds:02d}"

    @property
    def display_name(self) -> str:
        """Display name"""
        if self.artist:
            return f"{self.artist} - {self.title}"
        return self.title

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'title': self.title,
            'artist': self.artist,
            'album': self.album,
            'duration_seconds': self.duration_seconds,
            'audio_source_uri': self.audio_source_uri,
            'cover_uri': self.cover_uri,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Track':
        """Create Track from a dictionary

        Accepts the web client's document keys (duration, audioUrl, coverUrl)
        as well as the to_dict() keys.
        """
        duration = data.get('duration_seconds', data.get('duration', 0)) or 0
        return cls(
            id=str(data['id']),
            title=data.get('title', ''),
            artist=data.get('artist', ''),
            album=data.get('album', ''),
            duration_seconds=duration,
            audio_source_uri=data.get('audio_source_uri', data.get('audioUrl', '')),
            cover_uri=data.get('cover_uri', data.get('coverUrl')) or None,
        )
