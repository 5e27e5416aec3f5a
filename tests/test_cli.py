"""Test the command line entry point."""

import json

import pytest

from benchreport import cli
from benchreport.clients import (
    APIError,
    FetchRunReportRun,
    LatestFinishedRun,
    RunStatus,
    SessionExpiredError,
)
from benchreport.report import BenchmarkResult


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("CODSPEED_GRAPHQL_TOKEN", "tok")
    monkeypatch.delenv("CODSPEED_REPOSITORY_OWNER", raising=False)
    monkeypatch.delenv("CODSPEED_REPOSITORY_NAME", raising=False)


class FakeClient:
    """Stands in for CodSpeedAPIClient; ``error`` is raised on every call."""

    error = None
    latest = LatestFinishedRun(id="run1", date="2025-09-04", status=RunStatus.COMPLETED)
    fetched = []

    @classmethod
    def from_config(cls, config):
        return cls()

    def get_latest_finished_run(self, owner, name):
        if self.error:
            raise self.error
        return self.latest

    def fetch_run_report(self, owner, name, run_id):
        if self.error:
            raise self.error
        self.fetched.append(run_id)
        return FetchRunReportRun(
            id=run_id,
            status=RunStatus.COMPLETED,
            url="https://codspeed.io/run",
            results=[
                BenchmarkResult(0.002, "cat/use.rs::fn1::libA"),
                BenchmarkResult(0.5, "cat/use.rs::fn1::libB"),
            ],
        )


@pytest.fixture
def fake_client(monkeypatch):
    FakeClient.error = None
    FakeClient.fetched = []
    monkeypatch.setattr(cli, "CodSpeedAPIClient", FakeClient)
    return FakeClient


def test_report_from_input_file(tmp_path):
    results_file = tmp_path / "results.json"
    results_file.write_text(json.dumps([
        {"time": 0.002, "benchmark": {"name": "fn1", "uri": "cat/use.rs::fn1::libA"}},
        {"time": 0.001, "benchmark": {"name": "fn2", "uri": "cat/use.rs::fn2::libA"}},
        {"time": 0.001, "benchmark": {"name": "bad", "uri": "onlyonepart"}},
    ]))
    output = tmp_path / "out" / "report.md"

    code = cli.main([
        "report", "--input", str(results_file), "--output", str(output),
        "--title", "Local", "--save-results", str(tmp_path / "agg"),
    ])

    assert code == cli.EXIT_OK
    report = output.read_text(encoding="utf-8")
    assert report.startswith("# Local\n")
    assert "| fn2 | 1ms |" in report
    assert (tmp_path / "agg" / "results.csv").exists()


def test_report_uses_latest_run(tmp_path, fake_client):
    output = tmp_path / "report.md"
    code = cli.main(["report", "--owner", "o", "--name", "n", "--output", str(output)])

    assert code == cli.EXIT_OK
    assert fake_client.fetched == ["run1"]
    assert "| fn1 | 2ms | 500ms |" in output.read_text(encoding="utf-8")


def test_report_explicit_run_id(tmp_path, fake_client):
    code = cli.main([
        "report", "--owner", "o", "--name", "n", "--run-id", "abc",
        "--output", str(tmp_path / "r.md"),
    ])
    assert code == cli.EXIT_OK
    assert fake_client.fetched == ["abc"]


def test_no_finished_run(tmp_path, fake_client, monkeypatch):
    monkeypatch.setattr(FakeClient, "latest", None)
    code = cli.main(["report", "--owner", "o", "--name", "n", "--output", str(tmp_path / "r.md")])
    assert code == cli.EXIT_NOT_FOUND


@pytest.mark.parametrize(
    "error, expected",
    [
        (SessionExpiredError("expired"), cli.EXIT_SESSION_EXPIRED),
        (APIError("down"), cli.EXIT_API_ERROR),
    ],
)
def test_api_errors_map_to_exit_codes(tmp_path, fake_client, error, expected):
    fake_client.error = error
    code = cli.main(["latest", "--owner", "o", "--name", "n"])
    assert code == expected


def test_missing_repository_is_config_error(fake_client):
    assert cli.main(["latest"]) == cli.EXIT_BAD_CONFIG


def test_latest_prints_run(fake_client, capsys):
    assert cli.main(["latest", "--owner", "o", "--name", "n"]) == cli.EXIT_OK
    assert capsys.readouterr().out.startswith("run1\t2025-09-04\tCOMPLETED")


def test_no_command_prints_help(capsys):
    assert cli.main([]) == cli.EXIT_OK
    assert "usage" in capsys.readouterr().out


def test_read_failure_exits_with_api_error(monkeypatch):
    """A connection reset while reading the response maps to the API exit code."""
    import urllib.request

    class BrokenResponse:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def read(self):
            raise ConnectionResetError(104, "Connection reset by peer")

    monkeypatch.setattr(urllib.request, "urlopen", lambda request, timeout=None: BrokenResponse())
    assert cli.main(["latest", "--owner", "o", "--name", "n"]) == cli.EXIT_API_ERROR


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps([1, 2]),
        json.dumps({"results": "nope"}),
        json.dumps([{"time": "fast", "benchmark": {"uri": "cat/use.rs::fn1::libA"}}]),
        json.dumps([{"time": 1.0, "benchmark": "cat/use.rs::fn1::libA"}]),
    ],
)
def test_bad_input_file(tmp_path, content):
    results_file = tmp_path / "results.json"
    results_file.write_text(content)
    code = cli.main(["report", "--input", str(results_file), "--output", str(tmp_path / "r.md")])
    assert code == cli.EXIT_BAD_INPUT


def test_missing_input_file(tmp_path):
    code = cli.main([
        "report", "--input", str(tmp_path / "missing.json"), "--output", str(tmp_path / "r.md"),
    ])
    assert code == cli.EXIT_BAD_INPUT


def test_load_results_file_accepts_wrapped_list(tmp_path):
    results_file = tmp_path / "results.json"
    results_file.write_text(json.dumps(
        {"results": [{"time": 0.5, "benchmark": {"uri": "cat/use.rs::fn1::libA"}}]}
    ))
    assert cli.load_results_file(results_file) == [BenchmarkResult(0.5, "cat/use.rs::fn1::libA")]


def test_unknown_status_from_server_is_api_error(monkeypatch):
    import io
    import urllib.request

    payload = {"data": {"repository": {"runs": [{"id": "r", "date": "d", "status": "ARCHIVED"}]}}}

    class Response(io.BytesIO):
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

    monkeypatch.setattr(
        urllib.request, "urlopen",
        lambda request, timeout=None: Response(json.dumps(payload).encode()),
    )
    assert cli.main(["latest", "--owner", "o", "--name", "n"]) == cli.EXIT_API_ERROR
