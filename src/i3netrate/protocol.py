"""The i3bar JSON streaming protocol: framing, parsing and serialization."""

import json
import logging
from typing import TextIO

from i3netrate.errors import EndOfStream, InputFramingError, MalformedPayloadError
from i3netrate.models import ANCHOR_NAME, StatusEntry

logger = logging.getLogger(__name__)

HEADER_LINES = 2  # {"version":1} and the opening "["
FIRST_PREFIX = "["
NEXT_PREFIX = ",["
SUFFIX = "]"


def parse_entries(line: str) -> list[StatusEntry]:
    """
    Parse one update line into its status entries.

    The line must be a JSON array of objects; entry order and field order
    are preserved.
    """
    try:
        entries = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(f"invalid JSON in update: {exc}") from exc

    if not isinstance(entries, list):
        raise MalformedPayloadError(f"expected a JSON array, got {type(entries).__name__}")

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise MalformedPayloadError(
                f"entry {index} is {type(entry).__name__}, expected an object"
            )
        name = entry.get("name")
        if name is not None and not isinstance(name, str):
            raise MalformedPayloadError(f"entry {index} has a non-string name")

    return entries


def find_anchor(entries: list[StatusEntry], name: str = ANCHOR_NAME) -> int:
    """Return the index of the first entry called ``name``, or -1."""
    for index, entry in enumerate(entries):
        if entry.get("name") == name:
            return index
    return -1


def splice_entry(
    entries: list[StatusEntry], entry: StatusEntry, anchor: str = ANCHOR_NAME
) -> list[StatusEntry]:
    """
    Return a new list with ``entry`` placed right before the anchor.

    Without an anchor the entry goes last. The input list is not modified.
    """
    index = find_anchor(entries, anchor)
    if index < 0:
        return [*entries, entry]
    return [*entries[:index], entry, *entries[index:]]


def serialize_entries(entries: list[StatusEntry], prefix: str, suffix: str = SUFFIX) -> str:
    """Render entries as one compact protocol line (without newline)."""
    body = ",".join(
        json.dumps(entry, separators=(",", ":"), ensure_ascii=False) for entry in entries
    )
    return f"{prefix}{body}{suffix}"


class ProtocolFramer:
    """
    Line framing for the i3bar stream.

    Echoes the header, hands out data lines with the continuation comma
    removed and writes updates back with the matching prefix.
    """

    def __init__(self, stdin: TextIO, stdout: TextIO) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._lines_read = 0
        self._lines_written = 0

    @property
    def updates_written(self) -> int:
        return self._lines_written

    def _readline(self) -> str:
        try:
            line = self._stdin.readline()
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise InputFramingError(f"cannot read input: {exc}") from exc
        if not line:
            raise EndOfStream("input stream closed")
        return line

    def _write(self, text: str) -> None:
        try:
            self._stdout.write(text)
            self._stdout.flush()
        except (OSError, ValueError) as exc:
            raise InputFramingError(f"cannot write output: {exc}") from exc

    def copy_header(self) -> None:
        """Copy the version line and the opening bracket through unchanged."""
        for position in range(HEADER_LINES):
            try:
                line = self._readline()
            except EndOfStream as exc:
                raise InputFramingError(
                    f"input ended inside the header (line {position + 1})"
                ) from exc
            self._write(line)
        logger.debug("Header copied")

    def read_update(self) -> str:
        """Read the next update, without its leading continuation comma."""
        line = self._readline()
        if self._lines_read > 0 and line.startswith(","):
            line = line[1:]
        self._lines_read += 1
        return line

    def write_update(self, entries: list[StatusEntry]) -> None:
        """Write one update line, comma-prefixed for all but the first."""
        prefix = FIRST_PREFIX if self._lines_written == 0 else NEXT_PREFIX
        self._write(serialize_entries(entries, prefix) + "\n")
        self._lines_written += 1
