"""
Polling fallback for servers without ICY metadata
"""

from typing import Callable, List, Optional, Sequence

import requests

from .cancellation import CancellationToken
from .config import DEFAULT_FALLBACK_PATHS
from .logger import NullLogger
from .models import TrackChangeEvent
from .parser import extract_now_playing


def candidate_endpoints(base_url: str, paths: Sequence[str] = DEFAULT_FALLBACK_PATHS) -> List[str]:
    """Build the ordered list of "now playing" URLs to try"""
    base = base_url.rstrip('/')
    return [f"{base}{path}" for path in paths]


class FallbackPoller:
    """Finds a working "now playing" endpoint and polls it"""

    def __init__(self, http: requests.Session, timeout: float = 10.0,
                 poll_interval: float = 5.0, paths: Sequence[str] = DEFAULT_FALLBACK_PATHS,
                 logger=None):
        self.http = http
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.paths = tuple(paths)
        self.logger = logger or NullLogger()

    def fetch(self, endpoint: str, token: CancellationToken, session=None) -> Optional[TrackChangeEvent]:
        """GET one endpoint and extract the now playing pair from its body

        While the body is read the response is attached to `session` (anything
        with attach/detach, normally a StreamSession) so stopping the session
        closes it. Raises requests exceptions on transport or status failures.
        """
        token.check()
        response = self.http.get(endpoint, timeout=self.timeout, stream=True)
        try:
            if session is not None:
                session.attach(response)
            token.check()
            response.raise_for_status()
            body = response.text
        finally:
            if session is not None:
                session.detach(response)
            response.close()
        token.check()

        pair = extract_now_playing(body)
        if pair is None:
            return None
        return TrackChangeEvent(artist=pair[0], title=pair[1])

    def run(self, base_url: str, token: CancellationToken,
            emit: Callable[[TrackChangeEvent], None], session=None) -> bool:
        """Try the candidates, then poll the first one that answers until cancelled

        Returns False if no endpoint produced metadata.
        """
        for endpoint in candidate_endpoints(base_url, self.paths):
            try:
                event = self.fetch(endpoint, token, session)
            except requests.RequestException as e:
                self.logger.debug("Endpoint failed", exc=e, endpoint=endpoint)
                continue

            if event is None:
                self.logger.debug("No now playing field in response", endpoint=endpoint)
                continue

            self.logger.info("Using now playing endpoint", endpoint=endpoint)
            token.check()
            emit(event)
            self._poll(endpoint, event, token, emit, session)
            return True

        self.logger.info("No now playing endpoint found", url=base_url)
        return False

    def _poll(self, endpoint: str, current: TrackChangeEvent, token: CancellationToken,
              emit: Callable[[TrackChangeEvent], None], session=None):
        """Re-fetch the locked endpoint every poll interval until cancelled"""
        while True:
            token.sleep(self.poll_interval)
            try:
                event = self.fetch(endpoint, token, session)
            except requests.RequestException as e:
                self.logger.debug("Poll failed", exc=e, endpoint=endpoint)
                continue

            if event is not None and event != current:
                current = event
                token.check()
                emit(event)
