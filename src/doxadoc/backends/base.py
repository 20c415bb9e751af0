"""Base abstractions for document generation backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from doxadoc.config import DocumentConfig
    from doxadoc.models import Composite, EnumType, Function, Page, Typedef


class DocumentBackend(Protocol):
    """Protocol for document generation backends.

    Backends own the markup. The DocumentGenerator walks the group tree,
    decides what is emitted and at which heading level, and delegates every
    piece of markup to the backend.

    Levels are semantic: 0 is the document title, 1 a top-level group,
    and every nesting step adds one.
    """

    def create_document(self, config: DocumentConfig) -> None:
        """Initialize a new document and emit its header."""
        ...

    def add_section_header(self, text: str, level: int) -> None:
        """Add a section heading at the given level."""
        ...

    def add_page(self, page: Page, level: int) -> None:
        """Render page content; titles nest below the given level."""
        ...

    def add_function(self, function: Function, level: int) -> None:
        """Render a function reference entry headed at the given level."""
        ...

    def add_enum(self, enum: EnumType, level: int) -> None:
        """Render an enum and its values headed at the given level."""
        ...

    def add_composite(self, composite: Composite, declaration: str, level: int) -> None:
        """Render a struct/union entry with its pre-rendered declaration."""
        ...

    def add_typedef(self, typedef: Typedef, level: int) -> None:
        """Render a typedef entry headed at the given level."""
        ...

    def end_section(self) -> None:
        """Close the content of a group."""
        ...

    def finalize(self) -> str:
        """Finalize and return the document."""
        ...
