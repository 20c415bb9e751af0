"""Tests for logging verbosity levels."""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

from doxadoc.diagnostics import DiagnosticKind, Diagnostics
from doxadoc.logger import get_logger, reset_logger, setup_logger
from doxadoc.models import GroupRecord, Page, RecordSet
from doxadoc.resolver import resolve_hierarchy

MakeGroup = Callable[..., GroupRecord]
MakeRecords = Callable[..., RecordSet]


class TestLogger:
    """Test the verbosity mapping."""

    def test_get_logger_is_singleton(self) -> None:
        assert get_logger() is get_logger()

    def test_level_0_only_warnings(self) -> None:
        output_stream = StringIO()
        setup_logger(0, stream=output_stream)

        try:
            logger = get_logger()
            logger.changes("attached")
            logger.checks("looked up")
            logger.warning("WARNING: dropped")

            assert output_stream.getvalue() == "WARNING: dropped\n"
        finally:
            reset_logger()

    def test_level_1_shows_changes(self) -> None:
        output_stream = StringIO()
        setup_logger(1, stream=output_stream)

        try:
            logger = get_logger()
            logger.changes("attached")
            logger.checks("looked up")

            assert output_stream.getvalue() == "attached\n"
        finally:
            reset_logger()

    def test_level_2_shows_checks(self) -> None:
        output_stream = StringIO()
        setup_logger(2, stream=output_stream)

        try:
            logger = get_logger()
            logger.checks("looked up")
            logger.debug("internals")

            assert output_stream.getvalue() == "looked up\n"
        finally:
            reset_logger()

    def test_level_3_shows_debug(self) -> None:
        output_stream = StringIO()
        setup_logger(3, stream=output_stream)

        try:
            get_logger().debug("internals")

            assert output_stream.getvalue() == "internals\n"
        finally:
            reset_logger()


class TestDiagnosticsLogging:
    """Test that collected problems are also reported."""

    def test_diagnostic_logged_once(self) -> None:
        output_stream = StringIO()
        setup_logger(0, stream=output_stream)

        try:
            diagnostics = Diagnostics()
            diagnostics.add(DiagnosticKind.UNATTACHED_PAGE, "Page p is lost")
            diagnostics.add(DiagnosticKind.UNATTACHED_PAGE, "Page p is lost")

            assert len(diagnostics) == 1
            assert output_stream.getvalue() == "WARNING: Page p is lost\n"
            assert str(next(iter(diagnostics))) == "[unattached-page] Page p is lost"
        finally:
            reset_logger()

    def test_resolver_reports_attachments_at_level_1(
        self, make_group: MakeGroup, make_records: MakeRecords
    ) -> None:
        output_stream = StringIO()
        setup_logger(1, stream=output_stream)

        try:
            records = make_records(
                [make_group("top", ["net_core"]), make_group("net_core")],
                pages=[Page(id="md_doc_net__core_intro")],
            )
            resolve_hierarchy(records)

            output = output_stream.getvalue()
            assert "Attached page md_doc_net__core_intro to group net_core" in output
            assert "Set parent of net_core to top" in output
        finally:
            reset_logger()

