"""
Core stream handling functionality

Opens the radio stream with ICY metadata requested and reads the
audio/metadata frames the server interleaves into the body.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .cancellation import CancellationToken
from .errors import IcyProtocolError, StreamConnectionError, StreamEndedError
from .logger import NullLogger

ICY_REQUEST_HEADER = 'Icy-MetaData'
ICY_METAINT_HEADER = 'icy-metaint'

# Metadata length byte counts 16-byte units
METADATA_UNIT = 16

_METAINT_RE = re.compile(r'\d+')


@dataclass
class ConnectionResult:
    """Outcome of negotiating the stream connection"""
    url: str
    metaint: Optional[int] = None
    response: Optional[requests.Response] = None

    @property
    def icy_capable(self) -> bool:
        return self.metaint is not None

    @property
    def stream(self) -> Any:
        """Raw body stream, positioned at the first audio byte"""
        return self.response.raw if self.response is not None else None


def parse_metaint(value: str) -> int:
    """Parse the icy-metaint header as a non-negative decimal integer"""
    value = value.strip()
    if not _METAINT_RE.fullmatch(value):
        raise IcyProtocolError(f"Invalid {ICY_METAINT_HEADER} header: {value!r}")
    return int(value)


class StreamConnector:
    """Negotiates the HTTP connection and detects ICY support"""

    def __init__(self, http: requests.Session, timeout: float = 10.0, logger=None):
        self.http = http
        self.timeout = timeout
        self.logger = logger or NullLogger()

    def connect(self, url: str, token: CancellationToken) -> ConnectionResult:
        """Issue the GET request and inspect only the response headers

        Returns an ICY capable result holding the open response when the server
        announces a metadata interval, otherwise a result without one.
        """
        token.check()
        self.logger.debug("Connecting to stream", url=url)

        try:
            response = self.http.get(
                url,
                headers={ICY_REQUEST_HEADER: '1'},
                stream=True,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StreamConnectionError(url, f"Failed to connect: {e}") from e

        if not response.ok:
            status = response.status_code
            response.close()
            raise StreamConnectionError(url, f"HTTP {status}", status_code=status)

        header = response.headers.get(ICY_METAINT_HEADER)
        if header is None:
            # Body is plain audio, nothing to read from it
            response.close()
            self.logger.debug("Stream has no ICY metadata", url=url)
            return ConnectionResult(url=url)

        try:
            metaint = parse_metaint(header)
        except IcyProtocolError:
            response.close()
            raise

        self.logger.debug("ICY metadata interval is %d bytes", metaint, url=url)
        return ConnectionResult(url=url, metaint=metaint, response=response)


class IcyFrameReader:
    """Reads one audio block plus its metadata block from an ICY stream"""

    def __init__(self, chunk_size: int = 8192):
        self.chunk_size = chunk_size

    def read_frame(self, stream, metaint: int, token: CancellationToken) -> Optional[str]:
        """Return the metadata text of the next frame, or None if it carries none

        Raises StreamEndedError when the server closes the stream mid-frame.
        """
        self._skip(stream, metaint, token)

        length = self._read_exactly(stream, 1, token)[0] * METADATA_UNIT
        if length == 0:
            return None

        data = self._read_exactly(stream, length, token)
        text = data.decode('utf-8', errors='replace').rstrip('\x00')
        return text or None

    def _skip(self, stream, count: int, token: CancellationToken):
        """Discard `count` audio bytes"""
        remaining = count
        while remaining > 0:
            token.check()
            chunk = stream.read(min(remaining, self.chunk_size))
            if not chunk:
                raise StreamEndedError(f"Stream ended {count - remaining} bytes into a {count} byte audio block")
            remaining -= len(chunk)

    def _read_exactly(self, stream, count: int, token: CancellationToken) -> bytes:
        buf = bytearray()
        while len(buf) < count:
            token.check()
            chunk = stream.read(count - len(buf))
            if not chunk:
                raise StreamEndedError(f"Stream ended after {len(buf)} of {count} metadata bytes")
            buf.extend(chunk)
        return bytes(buf)
