# -*- coding: utf-8 -*-
"""
Ports Interfaces Package

Defines the interfaces between the player session and external infrastructure
(media output, database).

Design Principles:
- Use Protocol to define interfaces, supporting structural subtyping.
- Service layer depends on these interfaces rather than concrete implementations.
- Facilitates replacing with fakes during testing.
"""

from core.ports.database import IDatabase
from core.ports.audio import (
    IMediaOutput,
    MediaEnded,
    MediaError,
    MediaErrorKind,
    MediaEvent,
    MediaListener,
    MediaProgress,
    OutputState,
)

__all__ = [
    "IDatabase",
    "IMediaOutput",
    "MediaEnded",
    "MediaError",
    "MediaErrorKind",
    "MediaEvent",
    "MediaListener",
    "MediaProgress",
    "OutputState",
]
