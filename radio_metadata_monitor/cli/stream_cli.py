"""
CLI for radio_metadata_monitor
"""

import time

import click

from ..core.config import MonitorConfig
from ..core.logger import get_logger
from ..core.models import TrackChangeEvent
from ..core.monitor import RadioMetadataMonitor

# Windows tray tooltips are limited to 127 characters
DEFAULT_MAX_LENGTH = 127
ELLIPSIS = '...'


def format_now_playing(event: TrackChangeEvent, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Render "Artist - Title" (or just the title), truncated to max_length"""
    text = str(event)
    if max_length and len(text) > max_length:
        return text[:max(max_length - len(ELLIPSIS), 0)] + ELLIPSIS
    return text


@click.command()
@click.argument('url')
@click.option('--env-file', type=click.Path(dir_okay=False), default=None,
              help='Read RADIO_METADATA_* settings from this .env file')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None,
              help='Also write JSON logs to this file')
@click.option('--max-length', type=int, default=DEFAULT_MAX_LENGTH, show_default=True,
              help='Truncate displayed track names to this many characters (0 disables)')
@click.option('--duration', type=float, default=0, show_default=True,
              help='Stop after this many seconds (0 runs until interrupted)')
def main(url, env_file, debug, log_file, max_length, duration):
    """Print the track currently playing on the radio stream at URL"""
    try:
        config = MonitorConfig.from_env(env_file)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='environment')

    logger = get_logger('radio_metadata_monitor', log_file=log_file,
                        level='DEBUG' if debug else config.log_level)

    monitor = RadioMetadataMonitor(config, logger=logger)
    monitor.subscribe(lambda event: click.echo(format_now_playing(event, max_length)))

    deadline = time.monotonic() + duration if duration > 0 else None
    try:
        monitor.start(url)

        # Keep main thread alive while the worker runs
        while monitor.is_running:
            if deadline is not None and time.monotonic() >= deadline:
                break
            time.sleep(0.2)
        else:
            click.echo("Monitoring ended", err=True)

    except KeyboardInterrupt:
        click.echo("\nStopping stream...", err=True)
    finally:
        monitor.close()


if __name__ == '__main__':
    main()
