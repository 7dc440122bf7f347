"""Shared fixtures: scripted counters and a controllable clock."""

import pytest


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCounterSource:
    """Counter source whose values are set by the test."""

    def __init__(self, rx: int = 0, tx: int = 0, interface: str = "test0") -> None:
        self.interface = interface
        self.rx = rx
        self.tx = tx
        self.reads = 0

    def add(self, rx: int = 0, tx: int = 0) -> None:
        self.rx += rx
        self.tx += tx

    def read(self) -> tuple[int, int]:
        self.reads += 1
        return self.rx, self.tx


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def counters() -> FakeCounterSource:
    return FakeCounterSource(rx=5_000_000, tx=2_000_000)


@pytest.fixture
def sysfs_root(tmp_path):
    """Build a fake /sys/class/net tree for interface test0."""

    def write(rx: str = "100\n", tx: str = "200\n", interface: str = "test0"):
        statistics = tmp_path / interface / "statistics"
        statistics.mkdir(parents=True, exist_ok=True)
        (statistics / "rx_bytes").write_text(rx)
        (statistics / "tx_bytes").write_text(tx)
        return str(tmp_path)

    return write
