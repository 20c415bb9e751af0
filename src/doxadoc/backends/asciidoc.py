"""AsciiDoc backend for document generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from doxadoc.models import CodeBlock, ListBlock, TextBlock, TitleBlock

if TYPE_CHECKING:
    from doxadoc.config import DocumentConfig
    from doxadoc.models import Block, Composite, EnumType, Function, Page, Param, Typedef

# Code blocks carrying a diagram definition are passed through untouched
DIAGRAM_MARKER = "[ditaa]"
NO_DOCUMENTATION = "No documentation entry."


class AsciidocBackend:
    """Backend for generating AsciiDoc documents."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.source_language = "C"

    def create_document(self, config: DocumentConfig) -> None:
        """Start a new document with title and attributes."""
        self.source_language = config.source_language
        self.lines = [
            f"= {config.title} API Documentation",
            f":source-highlighter: {config.source_highlighter}",
            f":toc: {config.toc}",
            f":toclevels: {config.toclevels}",
            "",
        ]

    def add_section_header(self, text: str, level: int) -> None:
        """Add a section heading; level 1 renders as ``==``."""
        self.lines.extend([self._heading(text, level), ""])

    def add_page(self, page: Page, level: int) -> None:
        """Render page blocks; a title of depth N is headed at ``level + N``."""
        self._add_blocks(page.blocks, level)

    def add_function(self, function: Function, level: int) -> None:
        """Render a function as a reference table, followed by its details."""
        self.add_section_header(function.name, level)
        self._open_table(function.brief)
        self._add_signature(f"{function.definition} {function.args_string}".rstrip())

        self.lines.extend(["| Parameters", "|"])
        for param in function.params:
            self.lines.append(f"{self._direction(param)}`{self._param_declaration(param)}`::")
            self.lines.append(param.description or "")
        self.lines.append("")

        if function.returns:
            self.lines.extend(["| Return", "|"])
            self.lines.extend(f"* {ret.strip()}" for ret in function.returns)
            self.lines.append("")

        self.lines.append("|===")
        if function.has_details:
            self.lines.extend(["====", "*Details / Examples:*", ""])
            self._add_blocks(function.details, level + 1, literal="....", discrete=True)
            self.lines.append("====")
        self.lines.append("")

    def add_enum(self, enum: EnumType, level: int) -> None:
        """Render an enum as a horizontal term list."""
        self.add_section_header(enum.name, level)
        if enum.doc:
            self.lines.extend([enum.doc, ""])
        self.lines.append("[horizontal]")
        for value in enum.values:
            self.lines.append(f"{value.name}:: {value.doc or NO_DOCUMENTATION}")
        self.lines.append("")

    def add_composite(self, composite: Composite, declaration: str, level: int) -> None:
        """Render a struct/union with its declaration in a source block."""
        self.add_section_header(composite.name, level)
        self._open_table(composite.brief_description)
        self._add_signature(declaration.rstrip("\n"))
        self.lines.extend(["|===", ""])

    def add_typedef(self, typedef: Typedef, level: int) -> None:
        """Render a typedef as a single horizontal term."""
        self.add_section_header(typedef.name, level)
        self.lines.append("[horizontal]")
        self.lines.append(f"{typedef.type} -> {typedef.name}:: {(typedef.doc or '').strip()}")
        self.lines.append("")

    def end_section(self) -> None:
        """Separate a group's content from what follows."""
        self.lines.append("")

    def finalize(self) -> str:
        """Finalize and return the AsciiDoc document."""
        return "\n".join(self.lines).rstrip("\n") + "\n"

    def _heading(self, text: str, level: int) -> str:
        return f"{'=' * (level + 1)} {text}"

    def _open_table(self, description: str) -> None:
        self.lines.extend(
            [
                "[cols='h,5a']",
                "|===",
                "| Description",
                f"| {description.strip()}",
                "",
            ]
        )

    def _add_signature(self, signature: str) -> None:
        self.lines.extend(
            ["| Signature", "|", f"[source,{self.source_language}]", "----", signature, "----", ""]
        )

    def _add_blocks(
        self, blocks: list[Block], level: int, *, literal: str = "----", discrete: bool = False
    ) -> None:
        for block in blocks:
            if isinstance(block, CodeBlock):
                code = block.code.rstrip("\n")
                if DIAGRAM_MARKER in code:
                    self.lines.append(code)
                else:
                    self.lines.extend([literal, code, literal])
                self.lines.append("")
            elif isinstance(block, TitleBlock):
                self.lines.append("")
                if discrete:
                    self.lines.append("[discrete]")
                self.lines.extend([self._heading(block.title, level + block.depth), ""])
            elif isinstance(block, TextBlock):
                if block.text.strip():
                    self.lines.extend([block.text.strip(), ""])
            elif isinstance(block, ListBlock):
                self.lines.append("")
                self.lines.extend(f" * {item.strip()}" for item in block.items)
                self.lines.append("")
            else:
                raise TypeError(f"Unknown block type: {type(block).__name__}")

    @staticmethod
    def _direction(param: Param) -> str:
        return f"*{param.direction}* " if param.direction else ""

    @staticmethod
    def _param_declaration(param: Param) -> str:
        declname = f" {param.declname}" if param.declname else ""
        return f"{param.type or ''}{declname}"
