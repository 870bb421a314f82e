"""End-to-end CLI coverage for the public commands exposed by lib_sender_options."""

from __future__ import annotations

import json
from pathlib import Path

import lib_cli_exit_tools
from click.testing import CliRunner

from lib_sender_options import cli, core


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


def _write_properties(tmp_path: Path) -> Path:
    path = tmp_path / "producer.properties"
    path.write_text("bootstrap.servers=localhost:9092\nclient.id=cli-test\n", encoding="utf-8")
    return path


def test_cli_show_outputs_json(tmp_path: Path) -> None:
    path = _write_properties(tmp_path)
    result = _runner().invoke(
        cli.cli,
        ["show", "--file", str(path), "--set", "acks=all", "--max-in-flight", "8", "--no-stop-on-error"],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["client_id"] == "cli-test"
    assert payload["properties"]["acks"] == "all"
    assert payload["max_in_flight"] == 8
    assert payload["stop_on_error"] is False
    assert payload["close_timeout_seconds"] is None


def test_cli_show_reads_environment_and_timeout(tmp_path: Path) -> None:
    result = _runner().invoke(
        cli.cli,
        ["show", "--env-prefix", "KAFKA", "--close-timeout", "2.5", "--indent", "2"],
        env={"KAFKA_BOOTSTRAP_SERVERS": "env:9092", "KAFKA_CLIENT_ID": "from-env"},
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["properties"]["bootstrap.servers"] == "env:9092"
    assert payload["client_id"] == "from-env"
    assert payload["close_timeout_seconds"] == 2.5


def test_cli_show_with_provenance(tmp_path: Path) -> None:
    path = _write_properties(tmp_path)
    result = _runner().invoke(cli.cli, ["show", "--file", str(path), "--set", "acks=1", "--provenance"])
    assert result.exit_code == 0, result.output
    meta = json.loads(result.output)["provenance"]
    assert meta["bootstrap.servers"]["layer"] == "file"
    assert meta["bootstrap.servers"]["path"].endswith("producer.properties")
    assert meta["acks"]["layer"] == "overrides"


def test_cli_show_reads_sources_once_for_provenance(tmp_path: Path, monkeypatch) -> None:
    path = _write_properties(tmp_path)
    loads: list[str] = []
    original_load = core._load_file

    def _counting_load(file_path: str):
        loads.append(file_path)
        return original_load(file_path)

    monkeypatch.setattr(core, "_load_file", _counting_load)
    result = _runner().invoke(cli.cli, ["show", "--file", str(path), "--provenance"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert len(loads) == 1
    assert payload["client_id"] == "cli-test"
    assert set(payload["provenance"]) == {"bootstrap.servers", "client.id"}


def test_cli_show_rejects_malformed_assignment() -> None:
    result = _runner().invoke(cli.cli, ["show", "--set", "no-separator"])
    assert result.exit_code != 0
    assert "KEY=VALUE" in result.output


def test_cli_show_rejects_non_positive_in_flight() -> None:
    result = _runner().invoke(cli.cli, ["show", "--max-in-flight", "0"])
    assert result.exit_code != 0


def test_cli_env_prefix_command() -> None:
    result = _runner().invoke(cli.cli, ["env-prefix", "kafka-producer"])
    assert result.exit_code == 0
    assert result.output.strip() == "KAFKA_PRODUCER"


def test_cli_info_handles_missing_metadata(monkeypatch) -> None:
    """`cli info` must degrade gracefully when package metadata is unavailable."""

    def _raise_pkg_not_found(*_args, **_kwargs):
        raise cli.metadata.PackageNotFoundError()

    monkeypatch.setattr(cli.metadata, "metadata", _raise_pkg_not_found)
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "metadata unavailable" in result.output


def test_cli_main_restores_traceback_flag(tmp_path: Path) -> None:
    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    path = _write_properties(tmp_path)
    exit_code = cli.main(["--traceback", "show", "--file", str(path)], restore_traceback=True)
    assert exit_code == 0
    assert getattr(lib_cli_exit_tools.config, "traceback", False) == previous_traceback


def test_cli_fail_command() -> None:
    result = _runner().invoke(cli.cli, ["fail"])
    assert result.exit_code != 0
    assert isinstance(result.exception, RuntimeError)
    assert str(result.exception) == "i should fail"
