"""
Background metadata monitoring for a single radio stream
"""

import threading
from typing import Callable, List, Optional

import requests

from .cancellation import CancellationToken
from .config import MonitorConfig
from .detector import ChangeDetector
from .errors import (
    IcyProtocolError,
    MetadataMonitorError,
    MonitoringCancelled,
    StreamConnectionError,
    StreamEndedError,
)
from .fallback import FallbackPoller
from .logger import NullLogger
from .models import MonitoringState, TrackChangeEvent
from .parser import parse_icy_metadata
from .stream import ConnectionResult, IcyFrameReader, StreamConnector

TrackCallback = Callable[[TrackChangeEvent], None]


class StreamSession:
    """One monitoring run: url, cancellation token, worker thread and open response"""

    def __init__(self, url: str):
        self.url = url
        self.token = CancellationToken()
        self.thread: Optional[threading.Thread] = None
        self.state = MonitoringState.IDLE
        self._response: Optional[requests.Response] = None
        self._released = False
        self._lock = threading.Lock()

    def is_alive(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def attach(self, response: requests.Response):
        """Hand the open response to the session so it is released with it"""
        with self._lock:
            if self._released:
                response.close()
                raise MonitoringCancelled()
            self._response = response

    def detach(self, response: requests.Response):
        """Take back a response the worker is about to close itself"""
        with self._lock:
            if self._response is response:
                self._response = None

    def release(self) -> bool:
        """Close the open response, once. Returns False if already released"""
        with self._lock:
            if self._released:
                return False
            self._released = True
            response, self._response = self._response, None
        if response is not None:
            response.close()
        return True


class RadioMetadataMonitor:
    """Watches a radio stream and reports track changes to subscribers

    ``start(url)`` launches a daemon worker thread that reads ICY metadata
    from the stream, or polls a "now playing" endpoint when the server has no
    ICY support. Callbacks registered with ``subscribe`` run on that thread.
    """

    def __init__(self, config: Optional[MonitorConfig] = None, logger=None,
                 http: Optional[requests.Session] = None):
        self.config = config or MonitorConfig()
        self.logger = logger or NullLogger()

        self.http = http or requests.Session()
        self.http.headers['User-Agent'] = self.config.user_agent

        self.connector = StreamConnector(self.http, self.config.request_timeout, self.logger)
        self.frame_reader = IcyFrameReader()
        self.poller = FallbackPoller(
            self.http,
            timeout=self.config.request_timeout,
            poll_interval=self.config.poll_interval,
            paths=self.config.fallback_paths,
            logger=self.logger,
        )

        self._session: Optional[StreamSession] = None
        self._lock = threading.RLock()
        self._subscribers: List[TrackCallback] = []
        self._subscribers_lock = threading.Lock()
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()

    @property
    def state(self) -> MonitoringState:
        session = self._session
        return session.state if session is not None else MonitoringState.IDLE

    @property
    def current_url(self) -> Optional[str]:
        session = self._session
        return session.url if session is not None else None

    @property
    def is_running(self) -> bool:
        session = self._session
        return session is not None and session.is_alive()

    def subscribe(self, callback: TrackCallback) -> Callable[[], None]:
        """Register a track change callback; returns a function that removes it"""
        with self._subscribers_lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._subscribers_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def start(self, url: str):
        """Start monitoring url, replacing any other session"""
        with self._lock:
            if self._closed:
                raise MetadataMonitorError("Monitor has been closed")

            session = self._session
            if session is not None and session.url == url and session.is_alive():
                self.logger.debug("Already monitoring stream", url=url)
                return

            self._stop_session()

            session = StreamSession(url)
            session.thread = threading.Thread(
                target=self._run,
                args=(session,),
                name='radio-metadata-monitor',
                daemon=True,
            )
            self._session = session
            self.logger.info("Starting metadata monitoring", url=url)
            session.thread.start()

    def stop(self):
        """Stop the current session, waiting briefly for the worker to exit"""
        with self._lock:
            self._stop_session()

    def close(self):
        """Stop monitoring and release the HTTP session"""
        with self._lock:
            if self._closed:
                return
            self._stop_session()
            self._closed = True
            self.http.close()

    def _stop_session(self):
        session = self._session
        if session is None:
            return

        session.token.cancel()
        if session.thread is not None and session.thread is not threading.current_thread():
            session.thread.join(self.config.stop_grace_period)
            if session.thread.is_alive():
                self.logger.warning("Monitoring thread did not stop within %.1fs",
                                    self.config.stop_grace_period, url=session.url)

        session.release()
        self._session = None
        self.logger.info("Stopped metadata monitoring", url=session.url)

    def _emit(self, event: TrackChangeEvent):
        with self._subscribers_lock:
            subscribers = list(self._subscribers)

        self.logger.info("Now playing: %s", event, artist=event.artist, title=event.title)
        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                self.logger.error("Track change subscriber failed", exc=e)

    def _run(self, session: StreamSession):
        """Worker thread body; never lets an exception escape"""
        url = session.url
        token = session.token
        try:
            session.state = MonitoringState.CONNECTING
            result = self.connector.connect(url, token)

            if result.icy_capable:
                session.attach(result.response)
                session.state = MonitoringState.STREAMING
                self._read_stream(result, token)
            else:
                session.state = MonitoringState.POLLING
                self.poller.run(url, token, self._emit, session)
        except MonitoringCancelled:
            self.logger.debug("Metadata monitoring cancelled", url=url)
        except StreamConnectionError as e:
            self.logger.error("Could not connect to stream", exc=e, url=url)
        except StreamEndedError as e:
            self.logger.info("Stream ended: %s", e, url=url)
        except IcyProtocolError as e:
            self.logger.error("ICY protocol error", exc=e, url=url)
        except Exception as e:
            if token.cancelled:
                # Closing the response during stop() interrupts a blocked read
                self.logger.debug("Metadata monitoring interrupted by stop", exc=e, url=url)
            else:
                self.logger.error("Error while monitoring metadata", exc=e, url=url)
        finally:
            session.release()
            session.state = MonitoringState.STOPPED

    def _read_stream(self, result: ConnectionResult, token: CancellationToken):
        """Read frames until the stream ends or monitoring is cancelled"""
        detector = ChangeDetector()
        stream = result.stream

        while True:
            text = self.frame_reader.read_frame(stream, result.metaint, token)
            if text is None:
                token.sleep(self.config.empty_frame_delay)
                continue

            block = parse_icy_metadata(text)
            if not block.title:
                self.logger.debug("No StreamTitle in metadata block", raw=text)
            elif detector.should_emit(block):
                title = block.song if block.song else block.title
                token.check()
                self._emit(TrackChangeEvent(artist=block.artist or '', title=title))

            token.sleep(self.config.frame_delay)
