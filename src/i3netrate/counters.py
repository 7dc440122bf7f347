"""Byte counter sources for a network interface."""

import logging
import os
from typing import Protocol

import psutil

from i3netrate.errors import CounterUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_INTERFACE = "enp3s0"
SYSFS_NET_ROOT = "/sys/class/net"


class CounterSource(Protocol):
    """Anything that can report cumulative (rx, tx) byte counters."""

    interface: str

    def read(self) -> tuple[int, int]: ...


def parse_counter(text: str, origin: str) -> int:
    """Parse a base-10 byte counter, allowing a single trailing newline."""
    value = text.rstrip("\n")
    if not (value.isascii() and value.isdigit()):
        raise CounterUnavailableError(f"invalid counter value {value!r} in {origin}")
    return int(value)


class SysfsCounterSource:
    """
    Read counters from the kernel's per-interface statistics files.

    Each of rx_bytes and tx_bytes holds one integer; both files are read
    on every call.
    """

    def __init__(self, interface: str = DEFAULT_INTERFACE, root: str = SYSFS_NET_ROOT) -> None:
        self.interface = interface
        self._statistics = os.path.join(root, interface, "statistics")

    @property
    def rx_path(self) -> str:
        return os.path.join(self._statistics, "rx_bytes")

    @property
    def tx_path(self) -> str:
        return os.path.join(self._statistics, "tx_bytes")

    def _read_file(self, path: str) -> int:
        try:
            with open(path, encoding="ascii") as fh:
                contents = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise CounterUnavailableError(f"cannot read {path}: {exc}") from exc
        return parse_counter(contents, path)

    def read(self) -> tuple[int, int]:
        return self._read_file(self.rx_path), self._read_file(self.tx_path)


class PsutilCounterSource:
    """Read counters through psutil, for hosts without sysfs."""

    def __init__(self, interface: str = DEFAULT_INTERFACE) -> None:
        self.interface = interface

    def read(self) -> tuple[int, int]:
        try:
            counters = psutil.net_io_counters(pernic=True)
        except (OSError, RuntimeError) as exc:
            raise CounterUnavailableError(f"cannot query interface counters: {exc}") from exc

        stats = counters.get(self.interface)
        if stats is None:
            raise CounterUnavailableError(f"unknown network interface {self.interface!r}")
        return stats.bytes_recv, stats.bytes_sent


def default_counter_source(
    interface: str = DEFAULT_INTERFACE, root: str = SYSFS_NET_ROOT
) -> CounterSource:
    """Prefer sysfs when the interface exposes it, otherwise fall back to psutil."""
    if os.path.isdir(os.path.join(root, interface, "statistics")):
        return SysfsCounterSource(interface, root)
    logger.debug("No sysfs statistics for %s, using psutil", interface)
    return PsutilCounterSource(interface)
