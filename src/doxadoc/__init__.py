"""Doxadoc - render Doxygen XML exports as a single AsciiDoc reference manual."""

__version__ = "0.3.0"
