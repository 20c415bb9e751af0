"""Record extraction from Doxygen XML output.

Doxygen writes an ``index.xml`` listing every compound plus one XML file
per compound (``<refid>.xml``). This module turns those files into the
records of :mod:`doxadoc.models`; it never renders anything.
"""

from __future__ import annotations

import re
from pathlib import Path

from lxml import etree

from .diagnostics import DiagnosticKind, Diagnostics
from .exceptions import ParseError, UnknownKindError
from .logger import DoxadocLogger, get_logger
from .models import (
    Block,
    CodeBlock,
    Composite,
    CompositeKind,
    CompoundKind,
    CompoundRecord,
    EnumType,
    EnumValue,
    Field,
    Function,
    GroupRecord,
    InnerClassRef,
    ListBlock,
    Page,
    Param,
    RecordSet,
    TextBlock,
    TitleBlock,
    Typedef,
)

INDEX_FILENAME = "index.xml"

# Index compound kinds that carry nothing for the manual
IGNORED_INDEX_KINDS = {"dir"}

# Section kind -> member kind parsed from it, in file and group compounds
_MEMBER_SECTION_KINDS = {"func": "function", "enum": "enum", "typedef": "typedef"}
# Section kinds that are recognised but not rendered
_SKIPPED_SECTION_KINDS = {"define", "var"}

_SECT_RE = re.compile(r"^sect(\d)$")


def _text(element: etree._Element | None) -> str:
    """All text content of an element, in document order."""
    if element is None:
        return ""
    return "".join(element.itertext())


def _child_text(parent: etree._Element, path: str) -> str:
    return _text(parent.find(path))


class DoxygenParser:
    """Parser for Doxygen XML documents.

    Fatal input problems (unknown kinds, unreadable XML) raise; tolerated ones
    (parameters without type or name, unhandled inline content) are collected
    in ``diagnostics``.
    """

    def __init__(
        self, diagnostics: Diagnostics | None = None, *, logger: DoxadocLogger | None = None
    ) -> None:
        self.logger = logger or get_logger()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(self.logger)

    def parse_index(self, path: Path | str) -> RecordSet:
        """Parse ``index.xml`` and every compound it lists, in index order.

        Args:
            path: The Doxygen XML directory or its index.xml

        Returns:
            All extracted records
        """
        index_path = Path(path)
        if index_path.is_dir():
            index_path = index_path / INDEX_FILENAME
        xml_dir = index_path.parent

        root = self._load(index_path)
        if root.tag != "doxygenindex":
            raise ParseError(f"Unhandled root element in {index_path}: {root.tag}")

        records = RecordSet()
        for compound in root.findall("compound"):
            kind = compound.get("kind", "")
            refid = compound.get("refid", "")
            self.logger.checks(f"Index compound {refid} of kind {kind}")
            if kind in IGNORED_INDEX_KINDS:
                continue
            if kind not in {k.value for k in CompoundKind}:
                self.logger.warning(f"WARNING: Unhandled doxygenindex compound kind: {kind}")
                continue
            records.compounds.append(self.parse_file(xml_dir / f"{refid}.xml"))

        self.logger.changes(f"Extracted {len(records.compounds)} compounds from {index_path}")
        return records

    def parse_file(self, path: Path | str) -> CompoundRecord:
        """Parse a single compound XML file."""
        self.logger.checks(f"Parsing input file: {path}")
        return self.parse_element(self._load(Path(path)))

    def parse_string(self, xml: str | bytes) -> CompoundRecord:
        """Parse a compound document held in memory."""
        data = xml.encode("utf-8") if isinstance(xml, str) else xml
        try:
            root = etree.fromstring(data, parser=self._xml_parser())
        except etree.XMLSyntaxError as e:
            raise ParseError(f"Failed to parse XML: {e}") from e
        return self.parse_element(root)

    def parse_element(self, root: etree._Element) -> CompoundRecord:
        """Parse a ``doxygen`` root element into a compound record.

        Raises:
            UnknownKindError: If the root element or compound kind is not handled
        """
        if root.tag != "doxygen":
            raise UnknownKindError(f"Unhandled/Unknown root element: {root.tag}")

        compound = root.find("compounddef")
        if compound is None:
            raise ParseError("Document has no compounddef element")

        raw_kind = compound.get("kind", "")
        try:
            kind = CompoundKind(raw_kind)
        except ValueError as e:
            raise UnknownKindError(f"Unknown/unhandled compounddef kind: {raw_kind}") from e

        record = CompoundRecord(
            kind=kind,
            id=compound.get("id", ""),
            name=_child_text(compound, "compoundname"),
            language=compound.get("language"),
        )

        if kind in (CompoundKind.FILE, CompoundKind.GROUP):
            members = CompoundRecord(kind=kind, id=record.id, name=record.name)
            self._parse_member_sections(compound, members)
            if kind == CompoundKind.FILE:
                record.functions = members.functions
                record.enums = members.enums
                record.typedefs = members.typedefs
            else:
                record.groups.append(self._parse_group(compound, members))
        elif kind == CompoundKind.PAGE:
            record.pages.append(self._parse_page(compound, record))
        elif kind == CompoundKind.STRUCT:
            record.structs.append(self._parse_composite(compound, record, CompositeKind.STRUCT))
        elif kind == CompoundKind.UNION:
            record.unions.append(self._parse_composite(compound, record, CompositeKind.UNION))

        return record

    def _xml_parser(self) -> etree.XMLParser:
        return etree.XMLParser(remove_comments=True)

    def _load(self, path: Path) -> etree._Element:
        if not path.exists():
            raise ParseError(f"File not found: {path}")
        try:
            tree = etree.parse(str(path), parser=self._xml_parser())
        except etree.XMLSyntaxError as e:
            raise ParseError(f"Failed to parse XML in {path}: {e}") from e
        return tree.getroot()

    def _parse_member_sections(self, compound: etree._Element, record: CompoundRecord) -> None:
        for section in compound.findall("sectiondef"):
            kind = section.get("kind", "")
            self.logger.checks(f"Parsing sectiondef kind {kind}")
            if kind in _SKIPPED_SECTION_KINDS:
                self.logger.warning(f"WARNING: sectiondef {kind} not implemented.")
                continue
            if kind not in _MEMBER_SECTION_KINDS:
                raise UnknownKindError(f"Unhandled section kind {kind} in {record.name}")

            for member in section.findall("memberdef"):
                member_kind = member.get("kind", "")
                if member_kind != _MEMBER_SECTION_KINDS[kind]:
                    raise UnknownKindError(
                        f"Unhandled memberdef kind {member_kind} in sectiondef {kind}"
                    )
                if member_kind == "function":
                    record.functions.append(self._parse_function(member))
                elif member_kind == "enum":
                    record.enums.append(self._parse_enum(member))
                else:
                    record.typedefs.append(self._parse_typedef(member))

    def _parse_group(self, compound: etree._Element, members: CompoundRecord) -> GroupRecord:
        title = _child_text(compound, "title")
        return GroupRecord(
            name=title or members.name,
            compound_id=members.id,
            child_names=[_text(inner) for inner in compound.findall("innergroup")],
            inner_classes=[
                InnerClassRef(inner.get("refid", "")) for inner in compound.findall("innerclass")
            ],
            functions=members.functions,
            enums=members.enums,
            typedefs=members.typedefs,
        )

    def _parse_composite(
        self, compound: etree._Element, record: CompoundRecord, kind: CompositeKind
    ) -> Composite:
        composite = Composite(
            name=record.name,
            kind=kind,
            id=record.id,
            brief_description=_child_text(compound, "briefdescription").strip(),
        )
        for section in compound.findall("sectiondef"):
            section_kind = section.get("kind", "")
            if section_kind != "public-attrib":
                raise UnknownKindError(f"Unhandled section kind {section_kind} in {record.name}")
            for member in section.findall("memberdef"):
                if member.get("kind") != "variable":
                    continue
                composite.fields.append(
                    Field(
                        type=_child_text(member, "type"),
                        name=_child_text(member, "name"),
                        args_string=_child_text(member, "argsstring"),
                        brief_description=_child_text(member, "briefdescription"),
                        detailed_description=_child_text(member, "detaileddescription"),
                        inbody_description=_child_text(member, "inbodydescription"),
                    )
                )
        return composite

    def _parse_typedef(self, member: etree._Element) -> Typedef:
        detail = member.find("detaileddescription")
        return Typedef(
            name=_child_text(member, "name"),
            type=_child_text(member, "type"),
            doc=_text(detail) if detail is not None else None,
        )

    def _parse_enum(self, member: etree._Element) -> EnumType:
        brief = member.find("briefdescription/para")
        enum = EnumType(
            name=_child_text(member, "name"),
            doc=_text(brief) if brief is not None else None,
        )
        for value in member.findall("enumvalue"):
            # Only the first paragraph of the brief description is kept
            value_brief = value.find("briefdescription/para")
            enum.values.append(
                EnumValue(
                    name=_child_text(value, "name"),
                    doc=_text(value_brief) if value_brief is not None else None,
                )
            )
        return enum

    def _parse_function(self, member: etree._Element) -> Function:
        function = Function(
            name=_child_text(member, "name"),
            return_type=_child_text(member, "type"),
            definition=_child_text(member, "definition"),
            args_string=_child_text(member, "argsstring"),
            brief=_child_text(member, "briefdescription").strip(),
        )

        for param in member.findall("param"):
            param_type = param.find("type")
            declname = param.find("declname")
            if param_type is None or declname is None:
                self.diagnostics.add(
                    DiagnosticKind.MALFORMED_PARAM,
                    f"Function {function.name} param type: {_text(param_type) or None}, "
                    f"param decl: {_text(declname) or None}",
                )
            function.params.append(
                Param(
                    type=_text(param_type) if param_type is not None else None,
                    declname=_text(declname) if declname is not None else None,
                )
            )

        detail = member.find("detaileddescription")
        if detail is not None:
            for para in detail.findall("para"):
                function.details.extend(self._para_blocks(para, function))

        return function

    def _parse_page(self, compound: etree._Element, record: CompoundRecord) -> Page:
        page = Page(id=record.id, name=record.name)
        title = compound.find("title")
        if title is not None:
            page.blocks.append(TitleBlock(_text(title), 0))
        detail = compound.find("detaileddescription")
        if detail is not None:
            self._section_blocks(detail, page.blocks)
        return page

    def _section_blocks(self, element: etree._Element, blocks: list[Block]) -> None:
        """Collect page content in document order, titles of ``sectN`` at depth N."""
        for child in element:
            if not isinstance(child.tag, str):
                continue
            if child.tag == "para":
                blocks.extend(self._para_blocks(child, None))
                continue
            match = _SECT_RE.match(child.tag)
            if match:
                title = child.find("title")
                if title is not None:
                    blocks.append(TitleBlock(_text(title), int(match.group(1))))
                self._section_blocks(child, blocks)
            elif child.tag != "title":
                self._section_blocks(child, blocks)

    def _para_blocks(self, para: etree._Element, function: Function | None) -> list[Block]:
        """Split a paragraph into text, code and list blocks.

        Inline markup (emphasis, refs, computer output) stays part of the
        surrounding text. Inside a function's detailed description, parameter
        lists and return sections are folded into the function instead.
        """
        if len(para) == 0:
            return [TextBlock(_text(para))]

        blocks: list[Block] = []
        run: list[str] = [para.text or ""]

        def flush() -> None:
            text = "".join(run)
            run.clear()
            if text.strip():
                blocks.append(TextBlock(text))

        for child in para:
            tag = child.tag if isinstance(child.tag, str) else ""
            if tag == "programlisting":
                flush()
                blocks.append(CodeBlock(self._program_listing(child)))
            elif tag in ("itemizedlist", "orderedlist"):
                flush()
                items = [
                    _text(item.find("para") if item.find("para") is not None else item)
                    for item in child.findall("listitem")
                ]
                blocks.append(ListBlock(items))
            elif tag == "parameterlist" and function is not None:
                flush()
                self._apply_parameter_list(child, function)
            elif tag == "simplesect":
                flush()
                kind = child.get("kind", "")
                if kind == "return" and function is not None:
                    function.returns.append(_text(child).strip())
                else:
                    self.diagnostics.add(
                        DiagnosticKind.UNHANDLED_CONTENT,
                        f"detailed description -> simplesect kind not handled: {kind}",
                    )
            else:
                run.append(_text(child))
            run.append(child.tail or "")

        flush()
        return blocks

    def _apply_parameter_list(self, parameter_list: etree._Element, function: Function) -> None:
        for item in parameter_list.findall("parameteritem"):
            name = item.find("parameternamelist/parametername")
            if name is None or not _text(name):
                continue
            wanted = _text(name).strip()
            description = item.find("parameterdescription/para")
            for param in function.params:
                if param.declname is not None and param.declname.strip() == wanted:
                    param.direction = name.get("direction")
                    param.description = _text(description) if description is not None else ""

    def _program_listing(self, listing: etree._Element) -> str:
        lines = [self._codeline(codeline) for codeline in listing.findall("codeline")]
        return "\n".join(lines)

    def _codeline(self, element: etree._Element) -> str:
        parts: list[str] = [element.text or ""]
        for child in element:
            if child.tag == "sp":
                parts.append(" ")
            elif child.tag in ("highlight", "ref"):
                parts.append(self._codeline(child))
            else:
                self.diagnostics.add(
                    DiagnosticKind.UNHANDLED_CONTENT,
                    f"Codeline element not handled: {child.tag}",
                )
            parts.append(child.tail or "")
        return "".join(parts)
