import json

import pytest
from typer.testing import CliRunner

from ipjournal.cli import app

runner = CliRunner()

LOG = (
    "192.168.1.0: 01.01.2020 12:34:56 Some log message\n"
    "192.168.1.255: 01.01.2020 12:34:56 Some log message\n"
    "192.168.1.255: 05.01.2020 08:00:00 Some log message\n"
    "10.0.0.1: 01.01.2020 12:34:56 Some log message\n"
    "garbage line\n"
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "access.log").write_text(LOG, encoding="utf-8")
    return tmp_path


def test_count_without_filters(workdir):
    result = runner.invoke(app, ["count", "--file-log", "access.log", "--file-output", "out.txt"])
    assert result.exit_code == 0, result.output
    assert (workdir / "out.txt").read_text().splitlines() == [
        "192.168.1.0: 1",
        "192.168.1.255: 2",
        "10.0.0.1: 1",
    ]
    assert "Wrote 3 addresses" in result.output


def test_count_with_subnet_and_window(workdir):
    result = runner.invoke(app, [
        "count",
        "--file-log", "access.log",
        "--file-output", "out.txt",
        "--address-start", "192.168.1.0",
        "--address-mask", "24",
        "--time-start", "01.01.2020",
        "--time-end", "01.01.2020 23:59:59",
    ])
    assert result.exit_code == 0, result.output
    assert (workdir / "out.txt").read_text().splitlines() == [
        "192.168.1.0: 1",
        "192.168.1.255: 1",
    ]


def test_equals_style_options(workdir):
    result = runner.invoke(app, ["count", "--file-log=access.log", "--file-output=out.txt"])
    assert result.exit_code == 0, result.output
    assert (workdir / "out.txt").exists()


def test_settings_from_default_config_file(workdir):
    (workdir / "appsettings.json").write_text(json.dumps({
        "file-log": "access.log",
        "file-output": "from-config.txt",
        "address-start": "10.0.0.0",
        "address-mask": 8,
    }))
    result = runner.invoke(app, ["count"])
    assert result.exit_code == 0, result.output
    assert (workdir / "from-config.txt").read_text().splitlines() == ["10.0.0.1: 1"]


def test_command_line_overrides_config_file(workdir):
    config = workdir / "custom.json"
    config.write_text(json.dumps({"file-log": "access.log", "file-output": "a.txt"}))
    result = runner.invoke(app, ["count", "--config", str(config), "--file-output", "b.txt"])
    assert result.exit_code == 0, result.output
    assert (workdir / "b.txt").exists()
    assert not (workdir / "a.txt").exists()


def test_csv_output(workdir):
    result = runner.invoke(app, [
        "count", "--file-log", "access.log", "--file-output", "out.csv", "--output-format", "csv",
    ])
    assert result.exit_code == 0, result.output
    lines = (workdir / "out.csv").read_text().splitlines()
    assert lines[0] == "address,count"
    assert lines[1] == "192.168.1.255,2"


@pytest.mark.parametrize("args,message", [
    (["--file-output", "out.txt"], "Parameter --file-log is required."),
    (["--file-log", "access.log"], "Parameter --file-output is required."),
    (["--file-log", "access.log", "--file-output", "out.txt", "--address-start", "300.1.1.1"],
     "Invalid address format"),
    (["--file-log", "access.log", "--file-output", "out.txt", "--address-mask", "0"],
     "Invalid mask length"),
    (["--file-log", "access.log", "--file-output", "out.txt", "--time-end", "yesterday"],
     "Invalid time format for end bound"),
])
def test_fatal_configuration_errors(workdir, args, message):
    result = runner.invoke(app, ["count", *args])
    assert result.exit_code == 1
    assert message in result.output
    assert not (workdir / "out.txt").exists()


def test_start_address_without_mask_stops_batch(workdir):
    result = runner.invoke(app, [
        "count", "--file-log", "access.log", "--file-output", "out.txt",
        "--address-start", "192.168.1.0",
    ])
    assert result.exit_code == 1
    assert "Invalid mask length" in result.output
    assert (workdir / "out.txt").read_text() == ""


def test_missing_log_file_still_writes_output(workdir):
    result = runner.invoke(app, ["count", "--file-log", "missing.log", "--file-output", "out.txt"])
    assert result.exit_code == 1
    assert "Failed to read log file" in result.output
    assert (workdir / "out.txt").read_text() == ""


def test_unwritable_output(workdir):
    result = runner.invoke(app, [
        "count", "--file-log", "access.log", "--file-output", "no-such-dir/out.txt",
    ])
    assert result.exit_code == 1
    assert "Failed to write output file" in result.output


def test_empty_option_clears_config_value(workdir):
    (workdir / "appsettings.json").write_text(json.dumps({
        "file-log": "access.log",
        "file-output": "out.txt",
        "address-start": "10.0.0.0",
        "address-mask": 8,
    }))
    result = runner.invoke(app, ["count", "--address-start", "", "--address-mask", ""])
    assert result.exit_code == 0, result.output
    assert len((workdir / "out.txt").read_text().splitlines()) == 3


def test_read_failure_reported_once(workdir):
    result = runner.invoke(app, ["count", "--file-log", "missing.log", "--file-output", "out.txt"])
    assert result.exit_code == 1
    assert result.output.count("Failed to read log file") == 1
