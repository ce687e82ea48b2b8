"""
Radio Metadata Monitor - now playing information from internet radio streams
"""

__version__ = '0.1.0'

from .core.config import MonitorConfig
from .core.errors import (
    MetadataMonitorError,
    StreamConnectionError,
    IcyProtocolError,
    StreamEndedError,
    MonitoringCancelled,
)
from .core.logger import get_logger, NullLogger
from .core.models import IcyMetadataBlock, MonitoringState, TrackChangeEvent
from .core.monitor import RadioMetadataMonitor
from .core.parser import parse_icy_metadata, extract_now_playing

__all__ = [
    'MonitorConfig',
    'MetadataMonitorError',
    'StreamConnectionError',
    'IcyProtocolError',
    'StreamEndedError',
    'MonitoringCancelled',
    'get_logger',
    'NullLogger',
    'IcyMetadataBlock',
    'MonitoringState',
    'TrackChangeEvent',
    'RadioMetadataMonitor',
    'parse_icy_metadata',
    'extract_now_playing',
]
