"""Pydantic schemas for YAML record dumps."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator


class TextBlockSchema(BaseModel):
    """Schema for a paragraph block."""

    kind: Literal["text"]
    text: str


class CodeBlockSchema(BaseModel):
    """Schema for a program listing block."""

    kind: Literal["code"]
    code: str


class ListBlockSchema(BaseModel):
    """Schema for a bullet list block."""

    kind: Literal["list"]
    items: list[str] = Field(default_factory=list)


class TitleBlockSchema(BaseModel):
    """Schema for a section title block."""

    kind: Literal["title"]
    title: str
    depth: int = Field(default=0, ge=0)


BlockSchema = Annotated[
    TextBlockSchema | CodeBlockSchema | ListBlockSchema | TitleBlockSchema,
    Field(discriminator="kind"),
]


class ParamSchema(BaseModel):
    """Schema for a function parameter."""

    type: str | None = None
    declname: str | None = None
    direction: str | None = None
    description: str | None = None


class FunctionSchema(BaseModel):
    """Schema for a function."""

    name: str
    return_type: str = ""
    definition: str = ""
    args_string: str = ""
    params: list[ParamSchema] = Field(default_factory=list)
    brief: str = ""
    details: list[BlockSchema] = Field(default_factory=list)
    returns: list[str] = Field(default_factory=list)

    @field_validator("returns", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Accept a single return description as a string."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]


class EnumValueSchema(BaseModel):
    """Schema for an enumerator."""

    name: str
    doc: str | None = None


class EnumSchema(BaseModel):
    """Schema for an enum."""

    name: str
    doc: str | None = None
    values: list[EnumValueSchema] = Field(default_factory=list)


class TypedefSchema(BaseModel):
    """Schema for a typedef."""

    name: str
    type: str
    doc: str | None = None


class FieldSchema(BaseModel):
    """Schema for a struct/union member."""

    type: str
    name: str
    args_string: str = ""
    brief_description: str = ""
    detailed_description: str = ""
    inbody_description: str = ""


class CompositeSchema(BaseModel):
    """Schema for a struct or union."""

    name: str
    id: str = ""
    brief_description: str = ""
    fields: list[FieldSchema] = Field(default_factory=list)


class PageSchema(BaseModel):
    """Schema for a page; ``id`` defaults to the owning compound's id."""

    id: str | None = None
    name: str = ""
    blocks: list[BlockSchema] = Field(default_factory=list)


class GroupSchema(BaseModel):
    """Schema for a group."""

    name: str
    children: list[str] = Field(default_factory=list)  # Child group names, in order
    inner_classes: list[str] = Field(default_factory=list)  # e.g. "structmy__config"
    functions: list[FunctionSchema] = Field(default_factory=list)
    enums: list[EnumSchema] = Field(default_factory=list)
    typedefs: list[TypedefSchema] = Field(default_factory=list)


class CompoundSchema(BaseModel):
    """Schema for one compound record."""

    kind: Literal["file", "page", "group", "struct", "union"]
    id: str
    name: str = ""
    language: str | None = None
    functions: list[FunctionSchema] = Field(default_factory=list)
    enums: list[EnumSchema] = Field(default_factory=list)
    typedefs: list[TypedefSchema] = Field(default_factory=list)
    pages: list[PageSchema] = Field(default_factory=list)
    groups: list[GroupSchema] = Field(default_factory=list)
    structs: list[CompositeSchema] = Field(default_factory=list)
    unions: list[CompositeSchema] = Field(default_factory=list)


class RecordDumpSchema(BaseModel):
    """Schema for the entire record dump."""

    name: str = "Index"
    compounds: list[CompoundSchema] = Field(default_factory=list)
