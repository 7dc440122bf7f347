"""i3netrate - network throughput segment for the i3bar protocol."""

__version__ = "0.1.0"
