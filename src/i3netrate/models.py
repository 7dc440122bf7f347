"""Data models for i3netrate."""

from dataclasses import dataclass
from typing import Any

# A status bar segment exactly as it arrived: name, instance, markup,
# full_text, color and anything else the generator sends.
StatusEntry = dict[str, Any]

ANCHOR_NAME = "ethernet"


@dataclass(slots=True, frozen=True)
class RateSample:
    """Counter snapshot used as the baseline for the next measurement."""

    timestamp: float  # Seconds since the epoch
    rx_bytes: int
    tx_bytes: int


@dataclass(slots=True, frozen=True)
class Rate:
    """Receive and transmit throughput in megabits per second."""

    rx_mbps: float
    tx_mbps: float

    def format(self) -> str:
        """Render the rate the way the status bar shows it."""
        return f"R: {self.rx_mbps:0.2f} T: {self.tx_mbps:0.2f} (Mbit/s)"

    def to_entry(self) -> StatusEntry:
        """Build the synthetic status entry for this rate."""
        return {"full_text": self.format()}
