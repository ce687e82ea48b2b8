"""
Monitor configuration
"""

import os
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

ENV_PREFIX = 'RADIO_METADATA_'

DEFAULT_FALLBACK_PATHS = ('/status-json.xsl', '/current.json', '/metadata', '/nowplaying')


class MonitorConfig:
    """Timeouts and endpoints used by the monitor"""

    def __init__(self,
                 request_timeout: float = 10.0,
                 frame_delay: float = 0.1,
                 empty_frame_delay: float = 1.0,
                 poll_interval: float = 5.0,
                 stop_grace_period: float = 2.0,
                 fallback_paths: Tuple[str, ...] = DEFAULT_FALLBACK_PATHS,
                 user_agent: str = 'radio-metadata-monitor/0.1.0',
                 log_level: str = 'INFO'):
        self.request_timeout = request_timeout
        self.frame_delay = frame_delay
        self.empty_frame_delay = empty_frame_delay
        self.poll_interval = poll_interval
        self.stop_grace_period = stop_grace_period
        self.fallback_paths = tuple(fallback_paths)
        self.user_agent = user_agent
        self.log_level = log_level

        for key in ('request_timeout', 'frame_delay', 'empty_frame_delay',
                    'poll_interval', 'stop_grace_period'):
            if getattr(self, key) < 0:
                raise ValueError(f"{key} must not be negative")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'MonitorConfig':
        """Create a MonitorConfig from a dictionary"""
        defaults = cls()
        return cls(
            request_timeout=float(config.get('request_timeout', defaults.request_timeout)),
            frame_delay=float(config.get('frame_delay', defaults.frame_delay)),
            empty_frame_delay=float(config.get('empty_frame_delay', defaults.empty_frame_delay)),
            poll_interval=float(config.get('poll_interval', defaults.poll_interval)),
            stop_grace_period=float(config.get('stop_grace_period', defaults.stop_grace_period)),
            fallback_paths=tuple(config.get('fallback_paths', defaults.fallback_paths)),
            user_agent=config.get('user_agent', defaults.user_agent),
            log_level=config.get('log_level', defaults.log_level),
        )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'MonitorConfig':
        """Load RADIO_METADATA_* variables, reading a .env file first if there is one"""
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        values = {}
        for key in ('request_timeout', 'frame_delay', 'empty_frame_delay',
                    'poll_interval', 'stop_grace_period', 'user_agent', 'log_level'):
            raw = os.getenv(ENV_PREFIX + key.upper())
            if raw is not None and raw.strip():
                values[key] = raw.strip()
        return cls.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return {
            'request_timeout': self.request_timeout,
            'frame_delay': self.frame_delay,
            'empty_frame_delay': self.empty_frame_delay,
            'poll_interval': self.poll_interval,
            'stop_grace_period': self.stop_grace_period,
            'fallback_paths': list(self.fallback_paths),
            'user_agent': self.user_agent,
            'log_level': self.log_level,
        }
