"""Data models for Doxadoc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Marker segment Doxygen uses in the dotted path of anonymous nested types
UNNAMED_MARKER = "__unnamed__"


class CompoundKind(Enum):
    """Kinds of compound records handed over by an extractor."""

    FILE = "file"
    PAGE = "page"
    GROUP = "group"
    STRUCT = "struct"
    UNION = "union"


class CompositeKind(Enum):
    """Struct or union."""

    STRUCT = "struct"
    UNION = "union"


@dataclass
class TextBlock:
    """Free-form paragraph text."""

    text: str


@dataclass
class CodeBlock:
    """Program listing, one source line per text line."""

    code: str


@dataclass
class ListBlock:
    """Bullet list."""

    items: list[str]


@dataclass
class TitleBlock:
    """Section title; depth 0 is the page title, N is a ``sectN`` title."""

    title: str
    depth: int = 0


# Union type for detail and page content
Block = TextBlock | CodeBlock | ListBlock | TitleBlock


def _default_blocks() -> list[Block]:
    return []


def _default_str_list() -> list[str]:
    return []


def _default_int_list() -> list[int]:
    return []


@dataclass
class Param:
    """A function parameter.

    ``type`` and ``declname`` are ``None`` when the source metadata omitted them.
    """

    type: str | None
    declname: str | None
    direction: str | None = None
    description: str | None = None


def _default_params() -> list[Param]:
    return []


@dataclass
class Function:
    """A documented function."""

    name: str
    return_type: str = ""
    definition: str = ""
    args_string: str = ""
    params: list[Param] = field(default_factory=_default_params)
    brief: str = ""
    details: list[Block] = field(default_factory=_default_blocks)
    returns: list[str] = field(default_factory=_default_str_list)

    @property
    def has_details(self) -> bool:
        """Whether any detail block carries content beyond whitespace placeholders."""
        for block in self.details:
            if isinstance(block, TextBlock):
                if block.text.strip():
                    return True
            else:
                return True
        return False


@dataclass
class EnumValue:
    """A single enumerator."""

    name: str
    doc: str | None = None


def _default_enum_values() -> list[EnumValue]:
    return []


@dataclass
class EnumType:
    """A documented enum and its values in declaration order."""

    name: str
    doc: str | None = None
    values: list[EnumValue] = field(default_factory=_default_enum_values)


@dataclass
class Typedef:
    """A documented typedef."""

    name: str
    type: str
    doc: str | None = None


@dataclass
class Field:
    """A struct or union member variable."""

    type: str
    name: str
    args_string: str = ""
    brief_description: str = ""
    detailed_description: str = ""
    inbody_description: str = ""


def _default_fields() -> list[Field]:
    return []


@dataclass
class Composite:
    """A struct or union.

    The name may encode nesting as a dotted path, with ``__unnamed__``
    segments standing for anonymous nested types. Field order is the
    declaration order and is significant.
    """

    name: str
    kind: CompositeKind
    id: str = ""
    brief_description: str = ""
    fields: list[Field] = field(default_factory=_default_fields)

    @property
    def segments(self) -> list[str]:
        """Dotted path segments of the name."""
        return self.name.split(".")

    @property
    def is_unnamed(self) -> bool:
        """True when the name contains the anonymous-type marker segment."""
        return UNNAMED_MARKER in self.segments


@dataclass
class Page:
    """Documentation page content; ``id`` is the id of the owning page compound."""

    id: str
    name: str = ""
    blocks: list[Block] = field(default_factory=_default_blocks)


@dataclass(frozen=True)
class InnerClassRef:
    """Reference from a group to a struct/union, e.g. ``structmy__config``."""

    refid: str

    def has_marker(self, marker: str) -> bool:
        """Whether the raw identifier starts with the given kind marker."""
        return self.refid.startswith(marker)


def _default_pages() -> list[Page]:
    return []


def _default_functions() -> list[Function]:
    return []


def _default_enums() -> list[EnumType]:
    return []


def _default_typedefs() -> list[Typedef]:
    return []


def _default_composites() -> list[Composite]:
    return []


def _default_inner_classes() -> list[InnerClassRef]:
    return []


@dataclass
class GroupRecord:
    """A documentation group (module).

    ``id``, ``parent_id``, ``child_ids`` and the attached pages/structs/unions
    are filled during hierarchy resolution.
    """

    name: str
    compound_id: str = ""
    child_names: list[str] = field(default_factory=_default_str_list)
    inner_classes: list[InnerClassRef] = field(default_factory=_default_inner_classes)
    functions: list[Function] = field(default_factory=_default_functions)
    enums: list[EnumType] = field(default_factory=_default_enums)
    typedefs: list[Typedef] = field(default_factory=_default_typedefs)
    pages: list[Page] = field(default_factory=_default_pages)
    structs: list[Composite] = field(default_factory=_default_composites)
    unions: list[Composite] = field(default_factory=_default_composites)
    id: int | None = None
    parent_id: int | None = None
    child_ids: list[int] = field(default_factory=_default_int_list)


def _default_groups() -> list[GroupRecord]:
    return []


@dataclass
class CompoundRecord:
    """Everything extracted from one input document."""

    kind: CompoundKind
    id: str
    name: str
    language: str | None = None
    functions: list[Function] = field(default_factory=_default_functions)
    enums: list[EnumType] = field(default_factory=_default_enums)
    typedefs: list[Typedef] = field(default_factory=_default_typedefs)
    pages: list[Page] = field(default_factory=_default_pages)
    groups: list[GroupRecord] = field(default_factory=_default_groups)
    structs: list[Composite] = field(default_factory=_default_composites)
    unions: list[Composite] = field(default_factory=_default_composites)


def _default_compounds() -> list[CompoundRecord]:
    return []


@dataclass
class RecordSet:
    """All compound records of one run, in extraction order."""

    name: str = "Index"
    compounds: list[CompoundRecord] = field(default_factory=_default_compounds)

    @property
    def groups(self) -> list[GroupRecord]:
        """All groups, documents first then groups within a document."""
        return [group for compound in self.compounds for group in compound.groups]

    @property
    def structs(self) -> list[Composite]:
        """All structs in extraction order."""
        return [struct for compound in self.compounds for struct in compound.structs]

    @property
    def unions(self) -> list[Composite]:
        """All unions in extraction order."""
        return [union for compound in self.compounds for union in compound.unions]

    @property
    def pages(self) -> list[Page]:
        """All pages in extraction order."""
        return [page for compound in self.compounds for page in compound.pages]

    def get_compound_by_name(self, name: str) -> CompoundRecord | None:
        """Get the first compound with the given name."""
        for compound in self.compounds:
            if compound.name == name:
                return compound
        return None
