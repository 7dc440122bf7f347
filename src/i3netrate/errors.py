"""Exceptions raised by the i3netrate pipeline."""


class NetRateError(Exception):
    """Base class for every failure that stops the filter."""


class InputFramingError(NetRateError):
    """A header or data line could not be read from the input stream."""


class EndOfStream(InputFramingError):
    """The input stream was closed."""


class MalformedPayloadError(NetRateError):
    """A data line is not a JSON array of status entries."""


class CounterUnavailableError(NetRateError):
    """A byte counter could not be read or parsed."""
