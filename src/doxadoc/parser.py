"""YAML parser for record dumps.

A record dump hands over already-extracted records without going through
Doxygen XML::

    compounds:
      - kind: group
        id: group__net
        groups:
          - name: net
            children: [net_core]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
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
from .schemas import (
    BlockSchema,
    CodeBlockSchema,
    CompositeSchema,
    CompoundSchema,
    EnumSchema,
    FunctionSchema,
    ListBlockSchema,
    RecordDumpSchema,
    TextBlockSchema,
    TypedefSchema,
)


def _to_block(block: BlockSchema) -> Block:
    if isinstance(block, TextBlockSchema):
        return TextBlock(block.text)
    if isinstance(block, CodeBlockSchema):
        return CodeBlock(block.code)
    if isinstance(block, ListBlockSchema):
        return ListBlock(list(block.items))
    return TitleBlock(block.title, block.depth)


def _to_function(data: FunctionSchema) -> Function:
    return Function(
        name=data.name,
        return_type=data.return_type,
        definition=data.definition,
        args_string=data.args_string,
        params=[
            Param(
                type=p.type,
                declname=p.declname,
                direction=p.direction,
                description=p.description,
            )
            for p in data.params
        ],
        brief=data.brief,
        details=[_to_block(b) for b in data.details],
        returns=list(data.returns),
    )


def _to_enum(data: EnumSchema) -> EnumType:
    return EnumType(
        name=data.name,
        doc=data.doc,
        values=[EnumValue(name=v.name, doc=v.doc) for v in data.values],
    )


def _to_typedef(data: TypedefSchema) -> Typedef:
    return Typedef(name=data.name, type=data.type, doc=data.doc)


def _to_composite(data: CompositeSchema, kind: CompositeKind) -> Composite:
    return Composite(
        name=data.name,
        kind=kind,
        id=data.id,
        brief_description=data.brief_description,
        fields=[
            Field(
                type=f.type,
                name=f.name,
                args_string=f.args_string,
                brief_description=f.brief_description,
                detailed_description=f.detailed_description,
                inbody_description=f.inbody_description,
            )
            for f in data.fields
        ],
    )


class RecordFileParser:
    """Parser for YAML record dumps.

    Only structure is checked here; group references are resolved later
    by the resolver.
    """

    def parse_file(self, file_path: Path | str) -> RecordSet:
        """Parse a YAML file into a RecordSet."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self._parse_data(data)  # type: ignore[arg-type]

    def parse_string(self, text: str) -> RecordSet:
        """Parse a YAML document held in memory."""
        try:
            data: Any = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self._parse_data(data)  # type: ignore[arg-type]

    def _parse_data(self, data: dict[str, Any]) -> RecordSet:
        """Parse the loaded YAML data into a RecordSet."""
        try:
            schema = RecordDumpSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid YAML structure: {e}") from e

        return RecordSet(
            name=schema.name,
            compounds=[self._parse_compound(c) for c in schema.compounds],
        )

    def _parse_compound(self, data: CompoundSchema) -> CompoundRecord:
        record = CompoundRecord(
            kind=CompoundKind(data.kind),
            id=data.id,
            name=data.name,
            language=data.language,
            functions=[_to_function(f) for f in data.functions],
            enums=[_to_enum(e) for e in data.enums],
            typedefs=[_to_typedef(t) for t in data.typedefs],
            pages=[
                Page(
                    id=page.id or data.id,
                    name=page.name or data.name,
                    blocks=[_to_block(b) for b in page.blocks],
                )
                for page in data.pages
            ],
            structs=[_to_composite(s, CompositeKind.STRUCT) for s in data.structs],
            unions=[_to_composite(u, CompositeKind.UNION) for u in data.unions],
        )

        for group in data.groups:
            record.groups.append(
                GroupRecord(
                    name=group.name,
                    compound_id=data.id,
                    child_names=list(group.children),
                    inner_classes=[InnerClassRef(refid) for refid in group.inner_classes],
                    functions=[_to_function(f) for f in group.functions],
                    enums=[_to_enum(e) for e in group.enums],
                    typedefs=[_to_typedef(t) for t in group.typedefs],
                )
            )

        return record
