"""Group hierarchy resolution.

Turns the flat list of group records into a forest rooted at a synthetic
root and attaches the pages and composite types each group owns. Groups
reference their children by name; references are resolved through a
case-insensitive index built once per run.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator
from typing import TYPE_CHECKING

from .diagnostics import DiagnosticKind, Diagnostics
from .exceptions import CircularReferenceError, MissingReferenceError, ValidationError
from .logger import DoxadocLogger, get_logger

if TYPE_CHECKING:
    from .models import Composite, GroupRecord, Page, RecordSet

# Key of the synthetic root in the tree map
ROOT_ID: int | None = None

# Page ids carry a fixed-length prefix (e.g. "md_doc_") before the group name
PAGE_MARKER_LENGTH = 7
STRUCT_MARKER = "struct"
UNION_MARKER = "union"

# Name up to the first run that is not an escaped ("__") underscore
_ESCAPED_NAME_RE = re.compile(r"^([a-zA-Z0-9]+(_{2,}[a-zA-Z0-9]*)+)")


def decode_prefixed_name(identifier: str, marker_length: int) -> str:
    """Decode the entity name encoded in a Doxygen identifier.

    The first ``marker_length`` characters are dropped, the remainder is cut
    after the last escaped-underscore run of its leading word and doubled
    underscores are folded back to single ones. Identifiers that do not
    follow the convention decode to an empty string.

    Examples:
        >>> decode_prefixed_name("md_doc_net__core_intro", 7)
        'net_core'
        >>> decode_prefixed_name("structmy__config", 6)
        'my_config'
    """
    match = _ESCAPED_NAME_RE.match(identifier[marker_length:])
    if not match:
        return ""
    return match.group(1).replace("__", "_")


class GroupIndex:
    """Case-insensitive group name index. Duplicate names keep the first group."""

    def __init__(self, groups: list[GroupRecord]) -> None:
        self._by_name: dict[str, GroupRecord] = {}
        for group in groups:
            self._by_name.setdefault(group.name.casefold(), group)

    def find(self, name: str) -> GroupRecord | None:
        """Return the group with the given name, or None."""
        return self._by_name.get(name.casefold())

    def resolve(self, name: str, referrer: str | None = None) -> int:
        """Return the id of the named group.

        Raises:
            MissingReferenceError: If no group has that name
        """
        group = self.find(name)
        if group is None or group.id is None:
            source = f"Group '{referrer}'" if referrer else "A group"
            raise MissingReferenceError(f"{source} references unknown child group: {name}")
        return group.id


class GroupTree:
    """Resolved group forest keyed by group id, ``ROOT_ID`` for the synthetic root."""

    def __init__(self, groups: list[GroupRecord], children: dict[int | None, list[int]]) -> None:
        self._groups: dict[int, GroupRecord] = {g.id: g for g in groups if g.id is not None}
        self._children = children

    def get(self, group_id: int) -> GroupRecord:
        """Get a group by id."""
        return self._groups[group_id]

    def child_ids(self, node_id: int | None) -> list[int]:
        """Ordered child ids of a node (``ROOT_ID`` for top-level groups)."""
        return list(self._children.get(node_id, []))

    def children_of(self, node_id: int | None) -> list[GroupRecord]:
        """Ordered child groups of a node."""
        return [self._groups[child_id] for child_id in self._children.get(node_id, [])]

    @property
    def roots(self) -> list[GroupRecord]:
        """Top-level groups in id order."""
        return self.children_of(ROOT_ID)

    def walk(self) -> Iterator[tuple[GroupRecord, int]]:
        """Depth-first traversal yielding (group, depth); top-level groups have depth 1."""

        def _walk(node_id: int | None, depth: int) -> Iterator[tuple[GroupRecord, int]]:
            for child in self.children_of(node_id):
                yield child, depth
                yield from _walk(child.id, depth + 1)

        yield from _walk(ROOT_ID, 1)

    def __len__(self) -> int:
        return len(self._groups)


def assign_group_ids(groups: list[GroupRecord]) -> None:
    """Number groups sequentially in encounter order and clear previous links."""
    for index, group in enumerate(groups):
        group.id = index
        group.parent_id = None
        group.child_ids = []


def attach_pages(
    groups: list[GroupRecord],
    pages: list[Page],
    index: GroupIndex,
    diagnostics: Diagnostics,
    *,
    standalone_pages: Collection[str] = (),
    logger: DoxadocLogger | None = None,
) -> None:
    """Attach each page to the group named by its id prefix.

    Pages whose id names no group are reported and left unattached. Pages
    listed in ``standalone_pages`` are rendered elsewhere and skipped.
    """
    log = logger or get_logger()
    for page in pages:
        if page.id in standalone_pages:
            continue
        group_name = decode_prefixed_name(page.id, PAGE_MARKER_LENGTH)
        group = index.find(group_name) if group_name else None
        log.checks(f"Page {page.id} -> candidate group '{group_name}'")
        if group is None:
            diagnostics.add(
                DiagnosticKind.UNATTACHED_PAGE,
                f"Page {page.id} does not belong to any group",
            )
            continue
        if any(existing is page for existing in group.pages):
            continue
        group.pages.append(page)
        log.changes(f"Attached page {page.id} to group {group.name}")


def _first_by_key(composites: list[Composite], key: str) -> dict[str, Composite]:
    index: dict[str, Composite] = {}
    for composite in composites:
        value = composite.name if key == "name" else composite.id
        if value:
            index.setdefault(value.casefold(), composite)
    return index


def attach_composites(
    groups: list[GroupRecord],
    structs: list[Composite],
    unions: list[Composite],
    diagnostics: Diagnostics,
    *,
    logger: DoxadocLogger | None = None,
) -> None:
    """Attach structs and unions to the groups that list them as inner classes.

    Struct references attach both the struct named by the decoded reference
    and the struct whose id equals the reference. Union references match by id.
    A group never receives the same composite name twice.
    """
    log = logger or get_logger()
    structs_by_name = _first_by_key(structs, "name")
    structs_by_id = _first_by_key(structs, "id")
    unions_by_id = _first_by_key(unions, "id")

    for group in groups:
        attached_structs = {s.name.casefold() for s in group.structs}
        attached_unions = {u.name.casefold() for u in group.unions}

        for ref in group.inner_classes:
            refid = ref.refid.casefold()
            if ref.has_marker(STRUCT_MARKER):
                struct_name = decode_prefixed_name(ref.refid, len(STRUCT_MARKER))
                by_name = structs_by_name.get(struct_name.casefold()) if struct_name else None
                by_id = structs_by_id.get(refid)
                if by_name is None and by_id is None:
                    diagnostics.add(
                        DiagnosticKind.UNRESOLVED_INNER_CLASS,
                        f"Group {group.name} references unknown struct {ref.refid}",
                    )
                    continue
                for struct in (by_name, by_id):
                    if struct is None or struct.name.casefold() in attached_structs:
                        continue
                    attached_structs.add(struct.name.casefold())
                    group.structs.append(struct)
                    log.changes(f"Attached struct {struct.name} to group {group.name}")
            elif ref.has_marker(UNION_MARKER):
                union = unions_by_id.get(refid)
                if union is None:
                    diagnostics.add(
                        DiagnosticKind.UNRESOLVED_INNER_CLASS,
                        f"Group {group.name} references unknown union {ref.refid}",
                    )
                    continue
                if union.name.casefold() in attached_unions:
                    continue
                attached_unions.add(union.name.casefold())
                group.unions.append(union)
                log.changes(f"Attached union {union.name} to group {group.name}")
            else:
                struct = structs_by_id.get(refid)
                if struct is not None and struct.name.casefold() not in attached_structs:
                    attached_structs.add(struct.name.casefold())
                    group.structs.append(struct)
                    log.changes(f"Attached struct {struct.name} to group {group.name}")
                else:
                    log.checks(f"Ignoring inner class {ref.refid} of group {group.name}")


def resolve_children(
    groups: list[GroupRecord], index: GroupIndex, *, logger: DoxadocLogger | None = None
) -> None:
    """Resolve child names to ids (declaration order) and set each child's parent.

    Raises:
        MissingReferenceError: If a child name matches no group
        CircularReferenceError: If a group lists itself as a child
        ValidationError: If a group is claimed by two different parents
    """
    log = logger or get_logger()
    for group in groups:
        for child_name in group.child_names:
            child_id = index.resolve(child_name, referrer=group.name)
            if child_id in group.child_ids:
                continue
            if child_id == group.id:
                raise CircularReferenceError(f"Group {group.name} lists itself as a child")
            group.child_ids.append(child_id)
            log.checks(f"Resolved child '{child_name}' of {group.name} to id {child_id}")

    by_id = {g.id: g for g in groups}
    for group in groups:
        for child_id in group.child_ids:
            child = by_id[child_id]
            if child.parent_id is not None and child.parent_id != group.id:
                previous = by_id[child.parent_id]
                raise ValidationError(
                    f"Group {child.name} is a child of both {previous.name} and {group.name}"
                )
            child.parent_id = group.id
            log.changes(f"Set parent of {child.name} to {group.name}")


def _check_circular_hierarchy(groups: list[GroupRecord]) -> None:
    """Check that following parent links always ends at the root."""
    by_id = {g.id: g for g in groups}
    for group in groups:
        path: list[GroupRecord] = []
        seen: set[int | None] = set()
        current: GroupRecord | None = group
        while current is not None:
            if current.id in seen:
                cycle = " -> ".join(g.name for g in path[path.index(current) :] + [current])
                raise CircularReferenceError(f"Circular group hierarchy detected: {cycle}")
            seen.add(current.id)
            path.append(current)
            current = by_id.get(current.parent_id) if current.parent_id is not None else None


def build_tree(groups: list[GroupRecord]) -> GroupTree:
    """Assemble the tree map: top-level groups in id order, children in declaration order."""
    children: dict[int | None, list[int]] = {ROOT_ID: []}
    for group in groups:
        assert group.id is not None
        children[group.id] = list(group.child_ids)
        if group.parent_id is None:
            children[ROOT_ID].append(group.id)
    return GroupTree(groups, children)


def resolve_hierarchy(
    records: RecordSet,
    diagnostics: Diagnostics | None = None,
    *,
    standalone_pages: Collection[str] = (),
    logger: DoxadocLogger | None = None,
) -> GroupTree:
    """Resolve the group hierarchy of a run.

    Running it again on the same records gives the same tree; attachments
    already made are not repeated.

    Args:
        records: All compound records of the run
        diagnostics: Collector for tolerated problems (a fresh one if omitted)
        standalone_pages: Page ids that are rendered outside the group tree
        logger: Logger to report progress on (defaults to the doxadoc logger)

    Returns:
        The resolved group forest
    """
    log = logger or get_logger()
    diagnostics = diagnostics if diagnostics is not None else Diagnostics(log)

    groups = records.groups
    assign_group_ids(groups)
    log.changes(f"Resolving hierarchy of {len(groups)} groups")

    index = GroupIndex(groups)
    attach_pages(
        groups,
        records.pages,
        index,
        diagnostics,
        standalone_pages=standalone_pages,
        logger=log,
    )
    attach_composites(groups, records.structs, records.unions, diagnostics, logger=log)
    resolve_children(groups, index, logger=log)
    _check_circular_hierarchy(groups)
    return build_tree(groups)
