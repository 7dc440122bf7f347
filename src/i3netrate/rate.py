"""Throughput calculation from cumulative byte counters."""

import time
from collections.abc import Callable

from i3netrate.counters import CounterSource
from i3netrate.models import Rate, RateSample

BITS_PER_BYTE = 8
BITS_PER_MEGABIT = 1_000_000


def bytes_to_mbps(bytes_per_second: float) -> float:
    """Convert a byte rate to megabits per second."""
    return bytes_per_second * BITS_PER_BYTE / BITS_PER_MEGABIT


class RateCalculator:
    """
    Derive receive/transmit rates from a counter source.

    The calculator holds no state of its own: the caller owns the
    RateSample and passes it to every measure() call.
    """

    def __init__(
        self,
        source: CounterSource,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the RateCalculator.

        Args:
            source: Where the cumulative byte counters come from.
            clock: Wall-clock time in seconds. Injectable for tests.
        """
        self._source = source
        self._clock = clock

    @property
    def source(self) -> CounterSource:
        return self._source

    def sample(self) -> RateSample:
        """Take a baseline sample of the current counters."""
        now = self._clock()
        rx_bytes, tx_bytes = self._source.read()
        return RateSample(timestamp=now, rx_bytes=rx_bytes, tx_bytes=tx_bytes)

    def measure(self, last: RateSample) -> tuple[Rate, RateSample]:
        """
        Measure throughput since the last sample.

        Returns the rate and the sample to use as the next baseline. A
        non-positive elapsed time yields a zero rate. Counter resets give a
        negative rate; they are reported as-is.
        """
        current = self.sample()
        elapsed = current.timestamp - last.timestamp

        if elapsed <= 0:
            return Rate(0.0, 0.0), current

        rx_delta = current.rx_bytes - last.rx_bytes
        tx_delta = current.tx_bytes - last.tx_bytes
        rate = Rate(
            rx_mbps=bytes_to_mbps(rx_delta / elapsed),
            tx_mbps=bytes_to_mbps(tx_delta / elapsed),
        )
        return rate, current
