"""Backend-agnostic document generator for Doxadoc."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from doxadoc.backends import AsciidocBackend
from doxadoc.composite import CompositeRenderer
from doxadoc.config import DocumentConfig
from doxadoc.diagnostics import Diagnostics
from doxadoc.exceptions import ValidationError
from doxadoc.logger import DoxadocLogger, get_logger
from doxadoc.resolver import ROOT_ID, GroupTree, resolve_hierarchy

if TYPE_CHECKING:
    from doxadoc.backends.base import DocumentBackend
    from doxadoc.models import GroupRecord, RecordSet


class DocumentGenerator:
    """Generate the reference manual from extracted records using a pluggable backend.

    The generator resolves the group hierarchy, then walks it depth first.
    Each group gets a heading one level below its parent, followed in fixed
    order by its pages, functions, enums, structs, unions and (optionally)
    typedefs. Empty collections emit nothing, not even their heading.
    """

    def __init__(
        self,
        records: RecordSet,
        backend: DocumentBackend,
        config: DocumentConfig | None = None,
        *,
        diagnostics: Diagnostics | None = None,
        logger: DoxadocLogger | None = None,
    ):
        """Initialize with records, backend, and optional configuration.

        Args:
            records: All compound records of the run
            backend: Backend implementation for format-specific rendering
            config: Document configuration (defaults apply when omitted)
            diagnostics: Collector for tolerated problems
            logger: Logger to report progress on
        """
        self.records = records
        self.backend = backend
        self.config = config or DocumentConfig()
        self.logger = logger or get_logger()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(self.logger)
        self.tree: GroupTree | None = None
        self.composite_renderer = CompositeRenderer(
            records.structs, records.unions, self.diagnostics, logger=self.logger
        )

    def generate(self) -> str:
        """Generate the complete document.

        Returns:
            Document content
        """
        readme = self.records.get_compound_by_name(self.config.readme_page)
        readme_pages = readme.pages if readme else []

        self.tree = resolve_hierarchy(
            self.records,
            self.diagnostics,
            standalone_pages={page.id for page in readme_pages},
            logger=self.logger,
        )

        self.backend.create_document(self.config)

        for page in readme_pages:
            self.backend.add_page(page, level=2)

        self._generate_groups(ROOT_ID, level=1)
        return self.backend.finalize()

    def _generate_groups(self, node_id: int | None, level: int) -> None:
        """Emit every child of a node, each followed by its own subtree."""
        assert self.tree is not None
        for group in self.tree.children_of(node_id):
            self.logger.checks(f"Rendering group {group.name} at level {level}")
            self._generate_group(group, level)
            self._generate_groups(group.id, level + 1)

    def _generate_group(self, group: GroupRecord, level: int) -> None:
        self.backend.add_section_header(group.name, level)

        for page in group.pages:
            self.backend.add_page(page, level + 1)

        if group.functions:
            self.backend.add_section_header("Functions", level + 1)
            for function in group.functions:
                self.backend.add_function(function, level + 2)

        if group.enums:
            self.backend.add_section_header("Enums", level + 1)
            for enum in group.enums:
                self.backend.add_enum(enum, level + 2)

        if group.structs:
            self.backend.add_section_header("Structs", level + 1)
            for struct in group.structs:
                declaration = self.composite_renderer.render(struct, depth=0)
                self.backend.add_composite(struct, declaration, level + 2)

        if group.unions:
            self.backend.add_section_header("Unions", level + 1)
            for union in group.unions:
                declaration = self.composite_renderer.render(union, depth=0)
                self.backend.add_composite(union, declaration, level + 2)

        if self.config.include_typedefs and group.typedefs:
            self.backend.add_section_header("Typedefs", level + 1)
            for typedef in group.typedefs:
                self.backend.add_typedef(typedef, level + 2)

        self.backend.end_section()


@dataclass
class RenderResult:
    """Rendered document together with what was tolerated on the way."""

    text: str
    diagnostics: Diagnostics
    tree: GroupTree


def render_document(
    records: RecordSet,
    config: DocumentConfig | None = None,
    *,
    diagnostics: Diagnostics | None = None,
    logger: DoxadocLogger | None = None,
) -> RenderResult:
    """Render records to AsciiDoc.

    Problems already collected while extracting the records can be passed in
    through ``diagnostics`` so the result (and strict mode) covers the whole run.

    Raises:
        ValidationError: In strict mode, when any diagnostic was collected
    """
    config = config or DocumentConfig()
    generator = DocumentGenerator(
        records, AsciidocBackend(), config, diagnostics=diagnostics, logger=logger
    )
    text = generator.generate()
    assert generator.tree is not None

    if config.strict and generator.diagnostics:
        details = "\n".join(f"  {d}" for d in generator.diagnostics)
        raise ValidationError(
            f"{len(generator.diagnostics)} problem(s) found in strict mode:\n{details}"
        )

    return RenderResult(text=text, diagnostics=generator.diagnostics, tree=generator.tree)
