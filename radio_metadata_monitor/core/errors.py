"""
Exceptions raised by the metadata monitoring engine
"""


class MetadataMonitorError(Exception):
    """Base class for all monitor errors"""


class StreamConnectionError(MetadataMonitorError):
    """The stream could not be opened (transport failure or HTTP error status)"""

    def __init__(self, url: str, message: str, status_code=None):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code


class IcyProtocolError(MetadataMonitorError):
    """The server broke the ICY framing contract"""


class StreamEndedError(IcyProtocolError):
    """The server closed the stream in the middle of a frame"""


class MonitoringCancelled(MetadataMonitorError):
    """Raised at a suspension point once monitoring has been cancelled"""
