"""Document generation backends."""

from doxadoc.backends.asciidoc import AsciidocBackend
from doxadoc.backends.base import DocumentBackend

__all__ = [
    "AsciidocBackend",
    "DocumentBackend",
]
