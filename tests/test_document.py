"""Tests for document generation."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from doxadoc.backends import AsciidocBackend
from doxadoc.config import DocumentConfig
from doxadoc.diagnostics import DiagnosticKind
from doxadoc.document import DocumentGenerator, render_document
from doxadoc.exceptions import ValidationError
from doxadoc.models import (
    CodeBlock,
    Composite,
    CompositeKind,
    CompoundKind,
    CompoundRecord,
    EnumType,
    EnumValue,
    Function,
    GroupRecord,
    ListBlock,
    Page,
    Param,
    RecordSet,
    TextBlock,
    TitleBlock,
    Typedef,
)

MakeGroup = Callable[..., GroupRecord]
MakeRecords = Callable[..., RecordSet]
MakeComposite = Callable[..., Composite]


def headings(text: str) -> list[str]:
    """Return every heading line of a document, title excluded."""
    return [line for line in text.splitlines() if line.startswith("==")]


def net_open() -> Function:
    return Function(
        name="net_open",
        return_type="int",
        definition="int net_open",
        args_string="(const char *name, int flags)",
        params=[
            Param(type="const char *", declname="name", direction="in", description="Name."),
            Param(type="int", declname="flags"),
        ],
        brief="Open a connection.",
        returns=["Handle or -1."],
    )


class TestDocumentStructure:
    """Test the depth-first walk and heading levels."""

    def test_header(self, make_records: MakeRecords) -> None:
        text = render_document(make_records([]), DocumentConfig(title="libnet")).text

        assert text.startswith(
            "= libnet API Documentation\n"
            ":source-highlighter: coderay\n"
            ":toc: left\n"
            ":toclevels: 4\n"
        )
        assert text.endswith("\n")
        assert not text.endswith("\n\n")

    def test_child_nested_under_parent(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        records = make_records([make_group("A", ["B"]), make_group("B")])
        text = render_document(records).text

        assert headings(text) == ["== A", "=== B"]

    def test_heading_depth_matches_tree_depth(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        records = make_records(
            [
                make_group("d"),
                make_group("a", ["b"]),
                make_group("b", ["c"]),
                make_group("c"),
            ]
        )
        result = render_document(records)

        assert headings(result.text) == ["== d", "== a", "=== b", "==== c"]
        for group, depth in result.tree.walk():
            assert f"{'=' * (depth + 1)} {group.name}" in result.text

    def test_subtree_before_next_sibling(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        records = make_records(
            [
                make_group("root", ["x", "y"]),
                make_group("y"),
                make_group("x", ["x1"]),
                make_group("x1"),
            ]
        )

        assert headings(render_document(records).text) == ["== root", "=== x", "==== x1", "=== y"]

    def test_content_order_within_group(
        self, make_group: MakeGroup, make_records: MakeRecords, make_composite: MakeComposite
    ) -> None:
        group = make_group(
            "net_core",
            inner_classes=["structnet__config", "unionnet__addr"],
            functions=[net_open()],
            enums=[EnumType(name="net_state")],
        )
        records = make_records(
            [group],
            pages=[Page(id="md_doc_net__core_intro", blocks=[TitleBlock("Intro")])],
            structs=[make_composite("net_config", [("int", "port")])],
            unions=[
                make_composite(
                    "net_addr", [("int", "v4")], kind=CompositeKind.UNION, id="unionnet__addr"
                )
            ],
        )

        assert headings(render_document(records).text) == [
            "== net_core",
            "=== Intro",
            "=== Functions",
            "==== net_open",
            "=== Enums",
            "==== net_state",
            "=== Structs",
            "==== net_config",
            "=== Unions",
            "==== net_addr",
        ]

    def test_empty_collections_have_no_heading(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        text = render_document(make_records([make_group("empty")])).text

        assert "Functions" not in text
        assert "Enums" not in text
        assert "Structs" not in text

    def test_readme_rendered_before_groups(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        readme = CompoundRecord(
            kind=CompoundKind.PAGE,
            id="md_README",
            name="md_README",
            pages=[Page(id="md_README", blocks=[TitleBlock("Overview"), TextBlock("Welcome.")])],
        )
        result = render_document(make_records([make_group("net")], extra=[readme]))

        assert headings(result.text) == ["=== Overview", "== net"]
        assert "Welcome.\n" in result.text
        assert not result.diagnostics

    def test_unattached_page_omitted(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        page = Page(id="md_doc_nowhere__to_go", blocks=[TextBlock("Lost page.")])
        result = render_document(make_records([make_group("net")], pages=[page]))

        assert "Lost page." not in result.text
        assert len(result.diagnostics.of_kind(DiagnosticKind.UNATTACHED_PAGE)) == 1

    def test_rendering_is_deterministic(
        self, make_group: MakeGroup, make_records: MakeRecords, make_composite: MakeComposite
    ) -> None:
        records = make_records(
            [
                make_group("top", ["net_core"]),
                make_group(
                    "net_core", inner_classes=["structnet__config"], functions=[net_open()]
                ),
            ],
            pages=[Page(id="md_doc_net__core_intro", blocks=[TitleBlock("Intro")])],
            structs=[make_composite("net_config", [("int", "port")])],
        )

        assert render_document(records).text == render_document(records).text

    def test_strict_mode_fails_on_diagnostics(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        records = make_records([make_group("net")], pages=[Page(id="md_doc_ghost__page")])

        with pytest.raises(ValidationError, match="strict mode"):
            render_document(records, DocumentConfig(strict=True))

    def test_typedefs_only_when_enabled(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        group = make_group(
            "net", typedefs=[Typedef(name="handle_t", type="uint32_t", doc=" Opaque handle. ")]
        )
        records = make_records([group])

        assert "Typedefs" not in render_document(records).text
        text = render_document(records, DocumentConfig(include_typedefs=True)).text
        assert "=== Typedefs\n" in text
        assert "[horizontal]\nuint32_t -> handle_t:: Opaque handle.\n" in text


class TestAsciidocBackend:
    """Test markup of individual entries."""

    def render_group(self, group: GroupRecord, make_records: MakeRecords) -> str:
        generator = DocumentGenerator(make_records([group]), AsciidocBackend())
        return generator.generate()

    def test_function_table(self, make_group: MakeGroup, make_records: MakeRecords) -> None:
        text = self.render_group(make_group("net", functions=[net_open()]), make_records)

        assert "[cols='h,5a']\n|===\n| Description\n| Open a connection.\n" in text
        assert "[source,C]\n----\nint net_open (const char *name, int flags)\n----\n" in text
        assert "| Parameters\n|\n*in* `const char * name`::\nName.\n`int flags`::\n" in text
        assert "| Return\n|\n* Handle or -1.\n" in text
        assert "Details / Examples" not in text

    def test_placeholder_detail_suppresses_details(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        function = net_open()
        function.details = [TextBlock("\n")]
        text = self.render_group(make_group("net", functions=[function]), make_records)

        assert "Details / Examples" not in text

    def test_details_block(self, make_group: MakeGroup, make_records: MakeRecords) -> None:
        function = net_open()
        function.details = [
            TextBlock("Opens it."),
            CodeBlock("int fd = net_open(\"eth0\", 0);"),
            ListBlock(["first", "second"]),
        ]
        text = self.render_group(make_group("net", functions=[function]), make_records)

        assert "====\n*Details / Examples:*\n\nOpens it.\n" in text
        assert "....\nint fd = net_open(\"eth0\", 0);\n....\n" in text
        assert " * first\n * second\n" in text

    def test_diagram_code_passed_through(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        diagram = "[ditaa]\n----\n+---+\n| A |\n+---+\n----"
        page = Page(id="md_doc_net__core_arch", blocks=[CodeBlock(diagram)])
        generator = DocumentGenerator(
            make_records([make_group("net_core")], pages=[page]), AsciidocBackend()
        )
        text = generator.generate()

        assert f"\n{diagram}\n" in text
        assert "----\n[ditaa]" not in text

    def test_page_code_uses_listing_delimiters(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        page = Page(id="md_doc_net__core_usage", blocks=[CodeBlock("make all")])
        generator = DocumentGenerator(
            make_records([make_group("net_core")], pages=[page]), AsciidocBackend()
        )

        assert "----\nmake all\n----\n" in generator.generate()

    def test_page_section_titles_nest_below_group(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        page = Page(
            id="md_doc_net__core_intro",
            blocks=[TitleBlock("Intro", 0), TitleBlock("Usage", 1), TitleBlock("Flags", 2)],
        )
        records = make_records(
            [make_group("top", ["net_core"]), make_group("net_core")], pages=[page]
        )

        assert headings(render_document(records).text) == [
            "== top",
            "=== net_core",
            "==== Intro",
            "===== Usage",
            "====== Flags",
        ]

    def test_enum_values(self, make_group: MakeGroup, make_records: MakeRecords) -> None:
        enum = EnumType(
            name="net_state",
            doc="State.",
            values=[EnumValue("NET_UP", "Up."), EnumValue("NET_DOWN")],
        )
        text = self.render_group(make_group("net", enums=[enum]), make_records)

        assert "==== net_state\n\nState.\n\n[horizontal]\n" in text
        assert "NET_UP:: Up.\nNET_DOWN:: No documentation entry.\n" in text

    def test_struct_declaration_in_table(
        self, make_group: MakeGroup, make_records: MakeRecords, make_composite: MakeComposite
    ) -> None:
        struct = make_composite("net_config", [("int", "port")], brief="Settings.")
        records = make_records(
            [make_group("net", inner_classes=["structnet__config"])], structs=[struct]
        )
        text = DocumentGenerator(records, AsciidocBackend()).generate()

        assert "| Description\n| Settings.\n" in text
        assert "----\nstruct net_config\n{\n   int port;\n};\n----\n" in text

    def test_source_language_configurable(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        records = make_records([make_group("net", functions=[net_open()])])
        text = render_document(records, DocumentConfig(source_language="cpp")).text

        assert "[source,cpp]" in text
