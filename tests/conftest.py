"""Pytest configuration and fixtures for doxadoc tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from doxadoc import context
from doxadoc.logger import reset_logger
from doxadoc.models import (
    Composite,
    CompositeKind,
    CompoundKind,
    CompoundRecord,
    Field,
    GroupRecord,
    InnerClassRef,
    Page,
    RecordSet,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def clean_state() -> Iterator[None]:
    """Reset process-wide logger and CLI context around every test."""
    reset_logger()
    context.set_config_path(None)
    yield
    reset_logger()
    context.set_config_path(None)


@pytest.fixture
def fixtures_dir() -> Path:
    """Get the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def make_group() -> Callable[..., GroupRecord]:
    """Factory for group records referencing children and inner classes by name."""

    def _make(
        name: str,
        children: list[str] | None = None,
        *,
        inner_classes: list[str] | None = None,
        **kwargs: Any,
    ) -> GroupRecord:
        return GroupRecord(
            name=name,
            compound_id=f"group__{name.lower()}",
            child_names=list(children or []),
            inner_classes=[InnerClassRef(refid) for refid in inner_classes or []],
            **kwargs,
        )

    return _make


@pytest.fixture
def make_composite() -> Callable[..., Composite]:
    """Factory for structs/unions; fields are given as (type, name) pairs."""

    def _make(
        name: str,
        fields: list[tuple[str, str]] | None = None,
        *,
        kind: CompositeKind = CompositeKind.STRUCT,
        id: str = "",  # noqa: A002 - mirrors the model field
        brief: str = "",
    ) -> Composite:
        return Composite(
            name=name,
            kind=kind,
            id=id,
            brief_description=brief,
            fields=[Field(type=t, name=n) for t, n in fields or []],
        )

    return _make


@pytest.fixture
def make_records() -> Callable[..., RecordSet]:
    """Factory for a record set: one group compound, then one compound per page/struct/union."""

    def _make(
        groups: list[GroupRecord] | None = None,
        *,
        pages: list[Page] | None = None,
        structs: list[Composite] | None = None,
        unions: list[Composite] | None = None,
        extra: list[CompoundRecord] | None = None,
    ) -> RecordSet:
        records = RecordSet()
        records.compounds.append(
            CompoundRecord(kind=CompoundKind.GROUP, id="groups", name="groups", groups=groups or [])
        )
        for page in pages or []:
            records.compounds.append(
                CompoundRecord(kind=CompoundKind.PAGE, id=page.id, name=page.name, pages=[page])
            )
        for struct in structs or []:
            records.compounds.append(
                CompoundRecord(
                    kind=CompoundKind.STRUCT, id=struct.id, name=struct.name, structs=[struct]
                )
            )
        for union in unions or []:
            records.compounds.append(
                CompoundRecord(
                    kind=CompoundKind.UNION, id=union.id, name=union.name, unions=[union]
                )
            )
        records.compounds.extend(extra or [])
        return records

    return _make
