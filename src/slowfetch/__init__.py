"""slowfetch - boxed, adaptively laid out system info for the terminal."""

__version__ = "0.1.0"
