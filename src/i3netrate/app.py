"""i3netrate - filter loop and command-line entry point."""

import logging
import sys
import threading
from queue import Queue

from i3netrate.counters import DEFAULT_INTERFACE, default_counter_source
from i3netrate.errors import EndOfStream, NetRateError
from i3netrate.models import Rate, RateSample, StatusEntry
from i3netrate.protocol import ProtocolFramer, parse_entries, splice_entry
from i3netrate.rate import RateCalculator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s: %(message)s"


class StatusFilter:
    """
    Inject a network throughput entry into every status bar update.

    Owns the RateSample: it is taken once by prime() and replaced by every
    process_update() call.
    """

    def __init__(
        self,
        framer: ProtocolFramer,
        calculator: RateCalculator,
        threaded: bool = False,
    ) -> None:
        """
        Initialize the StatusFilter.

        Args:
            framer: Reads updates from and writes updates to the bar streams.
            calculator: Computes the rate since the previous sample.
            threaded: Measure the rate on a worker thread while the line is
                parsed. The worker is always joined before the next line.
        """
        self._framer = framer
        self._calculator = calculator
        self._threaded = threaded
        self._sample: RateSample | None = None

    @property
    def sample(self) -> RateSample | None:
        """The current baseline sample."""
        return self._sample

    def prime(self) -> RateSample:
        """Take the startup baseline sample."""
        self._sample = self._calculator.sample()
        return self._sample

    def _measure(self) -> Rate:
        if self._sample is None:
            self.prime()
        rate, self._sample = self._calculator.measure(self._sample)
        return rate

    def _measure_into(self, results: "Queue[Rate | Exception]") -> None:
        try:
            results.put(self._measure())
        except Exception as exc:  # re-raised on the loop thread
            results.put(exc)

    def _measure_in_background(self, line: str) -> tuple[list[StatusEntry], Rate]:
        results: Queue[Rate | Exception] = Queue(maxsize=1)
        worker = threading.Thread(
            target=self._measure_into,
            args=(results,),
            daemon=True,
            name="RateWorker",
        )
        worker.start()
        try:
            entries = parse_entries(line)
        finally:
            # The sample update must finish before anything else touches it
            worker.join()

        outcome = results.get()
        if isinstance(outcome, Exception):
            raise outcome
        return entries, outcome

    def process_update(self) -> None:
        """Read, splice and write a single update."""
        line = self._framer.read_update()

        if self._threaded:
            entries, rate = self._measure_in_background(line)
        else:
            rate = self._measure()
            entries = parse_entries(line)

        self._framer.write_update(splice_entry(entries, rate.to_entry()))

    def run(self) -> None:
        """
        Copy the header, then process updates until the input ends.

        Clean end of input returns normally; every other failure propagates.
        """
        if self._sample is None:
            self.prime()
        self._framer.copy_header()

        while True:
            try:
                self.process_update()
            except EndOfStream:
                logger.info("Input closed after %d updates", self._framer.updates_written)
                return


def configure_logging(level: int = logging.WARNING) -> None:
    """Send diagnostics to standard error; stdout carries the protocol."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def main() -> int:
    """Entry point for the i3netrate filter."""
    configure_logging()
    try:
        calculator = RateCalculator(default_counter_source(DEFAULT_INTERFACE))
        status_filter = StatusFilter(ProtocolFramer(sys.stdin, sys.stdout), calculator)
        status_filter.run()
    except NetRateError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
