"""Rendering of struct and union declarations.

Fields whose type names another struct or union are expanded in place as
nested declaration blocks. Anonymous nested structs share the scope of
their owner, so a struct field is bound to its definition by the owning
scope plus the field name (the last segment of the nested struct's dotted
name).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .diagnostics import DiagnosticKind, Diagnostics
from .exceptions import CircularReferenceError
from .logger import DoxadocLogger, get_logger
from .models import CompositeKind

if TYPE_CHECKING:
    from .models import Composite, Field

INDENT = "   "
STRUCT_TYPE_MARKER = "struct "
UNION_TYPE_MARKER = "union "


def type_scope(raw_type: str, marker: str) -> str:
    """Strip the struct/union marker and return the scope before ``::``.

    Examples:
        >>> type_scope("union packet::__unnamed__", "union ")
        'packet'
    """
    return raw_type.replace(marker, "").split("::")[0].strip()


class CompositeIndex:
    """Lookup tables for struct/union cross-references.

    Unions are found by full name or by any dotted-path prefix of their name,
    the first union in list order winning. Structs are keyed by a dotted-path
    prefix together with their own last segment; every struct under a key is
    kept in list order.
    """

    def __init__(self, structs: list[Composite], unions: list[Composite]) -> None:
        self._unions: dict[str, Composite] = {}
        for union in unions:
            segments = union.segments
            for end in range(1, len(segments) + 1):
                self._unions.setdefault(".".join(segments[:end]).casefold(), union)

        self._structs: dict[tuple[str, str], list[Composite]] = {}
        for struct in structs:
            segments = struct.segments
            for end in range(1, len(segments) + 1):
                key = (".".join(segments[:end]).casefold(), segments[-1])
                self._structs.setdefault(key, []).append(struct)

    def find_union(self, scope: str) -> Composite | None:
        """First union whose name is, or starts with, the given scope."""
        return self._unions.get(scope.casefold())

    def find_structs(self, scope: str, field_name: str) -> list[Composite]:
        """Structs under the given scope whose last name segment equals the field name."""
        return list(self._structs.get((scope.casefold(), field_name), []))


class CompositeRenderer:
    """Render a struct or union as a C-like declaration block."""

    def __init__(
        self,
        structs: list[Composite],
        unions: list[Composite],
        diagnostics: Diagnostics | None = None,
        *,
        logger: DoxadocLogger | None = None,
    ) -> None:
        """Initialize with every struct and union known to the run.

        Args:
            structs: All structs, used to resolve struct-typed fields
            unions: All unions, used to resolve union-typed fields
            diagnostics: Collector for unresolved field types
            logger: Logger to report lookups on
        """
        self.index = CompositeIndex(structs, unions)
        self.logger = logger or get_logger()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(self.logger)

    def render(self, composite: Composite, depth: int = 0, field_name: str | None = None) -> str:
        """Render a declaration block.

        Args:
            composite: The struct or union to render
            depth: Nesting depth, one indent unit per level
            field_name: Name of the enclosing field, used on the closing brace

        Returns:
            The declaration, one line per declaration line

        Raises:
            CircularReferenceError: If a field type leads back to a composite
                that is already being expanded
        """
        lines: list[str] = []
        self._render(composite, depth, field_name, lines, [])
        return "\n".join(lines) + "\n"

    def _render(
        self,
        composite: Composite,
        depth: int,
        field_name: str | None,
        lines: list[str],
        active: list[Composite],
    ) -> None:
        if any(c is composite for c in active):
            cycle = " -> ".join(c.name for c in [*active, composite])
            raise CircularReferenceError(f"Circular composite type detected: {cycle}")
        active.append(composite)

        indent = INDENT * depth
        if composite.kind == CompositeKind.UNION:
            lines.append(f"{indent}union")
        elif composite.is_unnamed:
            lines.append(f"{indent}struct")
        else:
            lines.append(f"{indent}struct {composite.name}")
        lines.append(f"{indent}{{")

        for field in composite.fields:
            self._render_field(composite, field, depth, lines, active)

        if composite.kind == CompositeKind.UNION:
            suffix = field_name if field_name and not composite.is_unnamed else None
        else:
            suffix = field_name
        lines.append(f"{indent}}} {suffix};" if suffix else f"{indent}}};")

        active.pop()

    def _render_field(
        self,
        owner: Composite,
        field: Field,
        depth: int,
        lines: list[str],
        active: list[Composite],
    ) -> None:
        if UNION_TYPE_MARKER in field.type:
            scope = type_scope(field.type, UNION_TYPE_MARKER)
            union = self.index.find_union(scope)
            self.logger.checks(f"Union field {owner.name}.{field.name}: scope '{scope}'")
            if union is None:
                self._unresolved(owner, field)
                return
            self._render(union, depth + 1, field.name, lines, active)
        elif STRUCT_TYPE_MARKER in field.type:
            scope = type_scope(field.type, STRUCT_TYPE_MARKER)
            structs = self.index.find_structs(scope, field.name)
            self.logger.checks(
                f"Struct field {owner.name}.{field.name}: scope '{scope}', "
                f"{len(structs)} candidate(s)"
            )
            if not structs:
                self._unresolved(owner, field)
                return
            for struct in structs:
                self._render(struct, depth + 1, field.name, lines, active)
        else:
            field_indent = INDENT * (depth + 1)
            if field.detailed_description.strip():
                lines.append(f"{field_indent}/** {field.name}{field.detailed_description}")
                lines.append(f"{field_indent}*/")
            lines.append(f"{field_indent}{field.type} {field.name}{field.args_string};")

    def _unresolved(self, owner: Composite, field: Field) -> None:
        self.diagnostics.add(
            DiagnosticKind.UNRESOLVED_FIELD_TYPE,
            f"Field {owner.name}.{field.name} has type '{field.type}' "
            "that matches no known struct or union",
        )
