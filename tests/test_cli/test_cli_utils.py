"""
Tests for CLI utilities and report output.
"""

import json
from io import BytesIO

import pytest

from field_timer.cli.output import build_report, format_report, write_report
from field_timer.cli.utils import load_document
from field_timer.config.models import OutputFormat
from field_timer.exceptions import ConfigurationError
from field_timer.graphql.models import GraphQLResponse, Status, TimingResult


def make_result(query, duration, status=Status.SUCCESS, payload=None):
    return TimingResult(
        duration=duration,
        query=query,
        response=GraphQLResponse(payload=payload or {"data": {"x": 1}}),
        status=status,
    )


@pytest.fixture
def results():
    return [
        make_result("query {\n  a\n}", 0.25),
        make_result("query {\n  b\n}", 1.5),
        make_result(
            "query {\n  c\n}",
            0.5,
            Status.FAILURE,
            {"errors": [{"message": "denied"}]},
        ),
    ]


class TestLoadDocument:
    """Test reading the input document."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "query.graphql"
        path.write_bytes(b"{ a }")

        assert load_document(path) == b"{ a }"

    def test_from_stdin(self):
        assert load_document(None, stdin=BytesIO(b"query { a }")) == b"query { a }"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="File not found"):
            load_document(tmp_path / "missing.graphql")

    def test_directory(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_document(tmp_path)


class TestReport:
    """Test report building and writing."""

    def test_build_report(self, results):
        report = build_report(results)

        assert report["total_queries"] == 3
        assert report["successful_queries"] == 2
        assert report["failed_queries"] == 1
        assert report["total_duration"] == pytest.approx(2.25)
        assert [entry["status"] for entry in report["results"]] == ["OK", "OK", "ERR"]

    def test_format_report_is_json(self, results):
        assert json.loads(format_report(results))["results"][2]["response"] == {
            "errors": [{"message": "denied"}]
        }

    def test_text_to_console(self, results, formatter):
        write_report(results, OutputFormat.TEXT, formatter)

        lines = formatter.console.file.getvalue().splitlines()
        assert lines[0] == " OK    0.250s  query { a }"
        assert lines[1] == " OK    1.500s  query { b }"
        assert lines[2] == " ERR   0.500s  query { c }"
        assert '"message": "denied"' in formatter.console.file.getvalue()

    def test_text_to_file(self, results, formatter, tmp_path):
        output = tmp_path / "report.txt"

        write_report(results, OutputFormat.TEXT, formatter, output)

        text = output.read_text(encoding="utf-8")
        assert " OK    0.250s  query { a }" in text
        assert "\033[" not in text
        assert formatter.console.file.getvalue() == ""

    def test_json_to_file(self, results, formatter, tmp_path):
        output = tmp_path / "report.json"

        write_report(results, OutputFormat.JSON, formatter, output)

        assert json.loads(output.read_text(encoding="utf-8"))["total_queries"] == 3

    def test_summary(self, results, formatter):
        formatter.print_summary(results)

        assert "3 queries, 2 succeeded, 1 failed, 2.250s total" in (
            formatter.err_console.file.getvalue()
        )

    @pytest.mark.parametrize("format_type", [OutputFormat.TEXT, OutputFormat.JSON])
    def test_unwritable_output(self, results, formatter, tmp_path, format_type):
        with pytest.raises(ConfigurationError, match="Error writing report") as exc_info:
            write_report(results, format_type, formatter, tmp_path)

        assert exc_info.value.details["path"] == str(tmp_path)

    def test_failure_dump_matches_result(self, results, formatter):
        formatter.print_result(results[2])

        output = formatter.console.file.getvalue()
        for line in results[2].dump_response().splitlines():
            assert line.strip() in output
