#!/usr/bin/env python3
"""
Expiry sweeper: periodically delete expired pastes on the authoritative node.

Pruning only reclaims storage. Expired pastes are already hidden from readers
by the store's read-time liveness check, so a skipped, delayed or failed sweep
never exposes expired content. Failures are logged and retried on the next tick.

The sweeper goes through the same WriteForwarder as request handlers, so it
always prunes on the authoritative node, even when started on a replica.

CLI usage:
    # Run forever, sweeping every SWEEP_INTERVAL_SECONDS (default: 1 hour)
    $ python -m mdow.sweeper

    # Sweep every 10 minutes, using the 'sweep_expired' AppConfig section
    $ python -m mdow.sweeper --function sweep_expired --interval 600

    # Sweep once and exit (e.g. from cron)
    $ python -m mdow.sweeper --once

Classes:
    ExpirySweeper:
        Background thread calling WriteForwarder.prune_expired() on a fixed interval.
"""

import sys
import signal
import logging
import argparse
import threading
from datetime import timedelta

from mdow.dao.exceptions import DAOError
from mdow.exceptions import MdowError
from mdow.store import WriteForwarder, build_forwarder
from mdow.utils import initialize_logging, load_config, load_settings, app_prefix


logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Prune expired pastes on a fixed interval.

    Attributes:
        forwarder (WriteForwarder):
            Forwarder routing prune_expired() to the authoritative node.
        interval (timedelta):
            Pause between two sweeps.

    Example:
        >>> sweeper = ExpirySweeper(forwarder, interval=timedelta(hours=1))
        >>> sweeper.start()
        >>> sweeper.running
        True
        >>> sweeper.stop()
    """

    def __init__(self, forwarder: WriteForwarder, interval: timedelta):
        if interval <= timedelta(0):
            raise ValueError(f'Sweep interval must be positive (given value: {interval}).')

        self.forwarder = forwarder
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep_once(self) -> int | None:
        """Run one sweep

        Returns:
            int | None: number of pruned pastes, None if the sweep failed.
        """
        try:
            removed = self.forwarder.prune_expired()
        except (DAOError, MdowError) as error:
            logger.exception(
                'Expiry sweep failed, retrying on the next tick.',
                extra={'event': 'SWEEP_FAILED', 'reason': str(error), 'error': error.__class__.__name__},
            )
            return None

        logger.info('Expiry sweep pruned %s pastes.', removed, extra={'event': 'SWEEP_SUCCESS', 'removed': removed})
        return removed

    def run(self) -> None:
        """Sweep immediately, then once every interval until stop() is called"""
        logger.info('Expiry sweeper started.', extra={'interval_seconds': self.interval.total_seconds()})
        self._tick()
        while not self._stop_event.wait(self.interval.total_seconds()):
            self._tick()
        logger.info('Expiry sweeper stopped.')

    def _tick(self) -> None:
        # The loop outlives any single sweep
        try:
            self.sweep_once()
        except Exception as error:
            logger.exception(
                'Unexpected error during expiry sweep, retrying on the next tick.',
                extra={'event': 'SWEEP_FAILED', 'reason': str(error), 'error': error.__class__.__name__},
            )

    def start(self) -> None:
        """Run the sweeper on a background daemon thread"""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name='expiry-sweeper', daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog='python -m mdow.sweeper',
        description='Periodically delete expired pastes on the authoritative node.',
    )
    parser.add_argument('--function', default='sweep_expired', help='AppConfig section to load (default: sweep_expired)')
    parser.add_argument('--interval', type=int, default=None, help='Seconds between sweeps (default: SWEEP_INTERVAL_SECONDS or 3600)')
    parser.add_argument('--once', action='store_true', help='Sweep once and exit')
    args = parser.parse_args(argv)

    initialize_logging()
    settings = load_settings()
    interval = timedelta(seconds=args.interval) if args.interval is not None else settings.sweep_interval

    forwarder = build_forwarder(load_config(args.function), settings, prefix=app_prefix())
    sweeper = ExpirySweeper(forwarder, interval=interval)

    if args.once:
        return 0 if sweeper.sweep_once() is not None else 1

    # run() happens on this thread, so stop() only flags the loop
    signal.signal(signal.SIGTERM, lambda *_: sweeper.stop())
    try:
        sweeper.run()
    except KeyboardInterrupt:
        logger.info('Expiry sweeper interrupted.')
    return 0


if __name__ == '__main__':
    sys.exit(main())
