"""
Data types passed between the monitor components
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MonitoringState(Enum):
    IDLE = 'idle'
    CONNECTING = 'connecting'
    STREAMING = 'streaming'
    POLLING = 'polling'
    STOPPED = 'stopped'


@dataclass
class IcyMetadataBlock:
    """One parsed ICY metadata block"""
    raw_metadata: str
    title: str = ''
    artist: Optional[str] = None
    song: Optional[str] = None


@dataclass(frozen=True)
class TrackChangeEvent:
    """Now playing information delivered to subscribers"""
    artist: str
    title: str

    def __str__(self) -> str:
        if not self.artist or not self.artist.strip():
            return self.title
        return f"{self.artist} - {self.title}"
