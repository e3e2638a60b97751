"""
Media Output Factory

Creates media outputs, supporting switching between multiple backends.
"""

import logging
from typing import List, Type, Dict, Optional

from core.audio_engine import MediaOutputBase, PygameMediaOutput

logger = logging.getLogger(__name__)

# Backend registry
_OUTPUT_REGISTRY: Dict[str, Type[MediaOutputBase]] = {}


def register_output(name: str, output_class: Type[MediaOutputBase]) -> None:
    """
    Register a media output backend.

    Args:
        name: Backend name identifier
        output_class: Output class
    """
    _OUTPUT_REGISTRY[name] = output_class


register_output("pygame", PygameMediaOutput)

try:
    from core.vlc_engine import VLCMediaOutput
    register_output("vlc", VLCMediaOutput)
except Exception:
    logger.debug("VLC backend unavailable")


class MediaOutputFactory:
    """
    Media Output Factory

    Creates the configured media output, falling back by priority.

    Usage Example:
        output = MediaOutputFactory.create("vlc")
        output = MediaOutputFactory.create_best_available()
        backends = MediaOutputFactory.get_available_backends()
    """

    # Backend priority (fallback order); VLC first because it can stream URLs
    PRIORITY_ORDER = ["vlc", "pygame"]

    @classmethod
    def create(cls, backend: str = "vlc") -> MediaOutputBase:
        """
        Create a specified media output.

        If the specified backend is unavailable, it falls back to an available one.

        Args:
            backend: Backend name ("vlc", "pygame")

        Returns:
            MediaOutputBase: Media output instance

        Raises:
            RuntimeError: If no backends are available
        """
        if backend in _OUTPUT_REGISTRY:
            try:
                output = _OUTPUT_REGISTRY[backend]()
                logger.info("Using media backend: %s", backend)
                return output
            except Exception as e:
                logger.warning("Failed to create %s backend: %s, attempting fallback", backend, e)
        else:
            logger.warning("Unknown media backend %r, attempting fallback", backend)

        return cls.create_best_available(exclude=[backend])

    @classmethod
    def create_best_available(
        cls, exclude: Optional[List[str]] = None
    ) -> MediaOutputBase:
        """
        Create the best available media output, trying backends in priority order.

        Raises:
            RuntimeError: If no backends are available
        """
        exclude = exclude or []

        for backend in cls.PRIORITY_ORDER:
            if backend in exclude or backend not in _OUTPUT_REGISTRY:
                continue

            try:
                output = _OUTPUT_REGISTRY[backend]()
                logger.info("Using media backend: %s", backend)
                return output
            except Exception as e:
                logger.debug("Backend %s unavailable: %s", backend, e)

        raise RuntimeError("No media backends available. Please install python-vlc or pygame.")

    @classmethod
    def get_available_backends(cls) -> List[str]:
        """
        Get the available backends, sorted by priority.

        Uses each backend's static probe(), which does not touch output devices.
        """
        return [backend for backend in cls.PRIORITY_ORDER if cls.is_available(backend)]

    @classmethod
    def is_available(cls, backend: str) -> bool:
        """
        Check if a backend is available.

        Args:
            backend: Backend name

        Returns:
            bool: True if available
        """
        if backend not in _OUTPUT_REGISTRY:
            return False

        try:
            return bool(_OUTPUT_REGISTRY[backend].probe())
        except Exception:
            return False
