"""End-to-end tests for the options of the top-level `chistogram` command.

These tests exercise verbosity flags, logger-level overrides, debug
formatting and the in-memory flight recorder by invoking the `log-demo`
command under various CLI flags and environment variables.
"""

import re
from pathlib import Path

import pytest

from chistogram import __version__
from chistogram.entrypoints.cli.main import chistogram
from tests.helpers.output_asserts import assert_in_output, assert_not_in_output

# pylint: disable=unused-argument


def test_version(runner):
    result = runner.invoke(chistogram, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(runner):
    result = runner.invoke(chistogram, ["--help"])
    assert result.exit_code == 0
    assert_in_output(r"\bmanifest\b", result.output)
    assert_in_output(r"\bpercentiles\b", result.output)


def test_default_shows_warning(registered_log_demo, runner, fs):
    """Default invocation shows WARNING and above but not INFO."""
    result = runner.invoke(chistogram, ["log-demo"])
    assert result.exit_code == 0
    assert_in_output("WARNING", result.output)
    assert_not_in_output("INFO", result.output)


def test_verbose_shows_info(registered_log_demo, runner, fs):
    """Single -v enables INFO-level console output (but not DEBUG)."""
    result = runner.invoke(chistogram, ["-v", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("INFO", result.output)
    assert_not_in_output("DEBUG", result.output)


def test_vv_shows_debug(registered_log_demo, runner, fs):
    """-vv enables DEBUG-level console output."""
    result = runner.invoke(chistogram, ["-vv", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("DEBUG", result.output)


def test_quiet_suppresses_warning(registered_log_demo, runner, fs):
    """-q lowers verbosity so WARNING is suppressed and ERROR remains."""
    result = runner.invoke(chistogram, ["-q", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("ERROR", result.output)
    assert_not_in_output("WARNING", result.output)


def test_qq_suppresses_error(registered_log_demo, runner, fs):
    """-qq leaves CRITICAL only."""
    result = runner.invoke(chistogram, ["-qq", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("CRITICAL", result.output)
    assert_not_in_output("ERROR", result.output)


def test_third_party_messages_are_prefixed(registered_log_demo, runner, fs):
    result = runner.invoke(chistogram, ["log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"\[some\] This is a warning-level third-party test message\.", result.output)


@pytest.mark.parametrize(
    "env, cli_args",
    [
        ({}, ["-vv", "-L", "some.thirdparty=INFO"]),
        ({"CHISTOGRAM_LOGGER_LEVELS": "some.thirdparty=INFO"}, ["-vv"]),
    ],
    ids=["cli-flag", "env-var"],
)
def test_logger_level_silences_debug(registered_log_demo, runner, fs, env, cli_args):
    """Logger-level overrides silence third-party DEBUG while keeping INFO+."""
    result = runner.invoke(chistogram, cli_args + ["log-demo"], env=env)
    assert result.exit_code == 0
    assert_not_in_output("This is a debug-level third-party test message.", result.output)
    assert_in_output("This is an info-level third-party test message.", result.output)


def test_invalid_logger_level_is_a_usage_error(runner, fs):
    result = runner.invoke(chistogram, ["-L", "numpy=LOUD", "manifest"])
    assert result.exit_code == 2
    assert_in_output("Invalid log level: LOUD", result.output)


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    """When --debug is set, log output includes file paths and line numbers."""
    result = runner.invoke(chistogram, ["--debug", "log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"conftest\.py:\d+\b", result.output)


def test_debug_mode_is_off_by_default(registered_log_demo, runner, fs):
    """By default, file paths are not included in log output."""
    result = runner.invoke(chistogram, ["log-demo"])
    assert result.exit_code == 0
    assert_not_in_output(r"conftest\.py:\d+\b", result.output)


def test_flight_recorder_flush_on_warning(registered_log_demo, runner, fs):
    """Flight recorder writes buffered DEBUG logs to disk when a WARNING occurs."""
    log_path = "flight_recorder.log"
    result = runner.invoke(
        chistogram,
        ["--log-path", log_path, "-L", "some.thirdparty=INFO", "log-demo"],
    )
    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")

    assert_in_output("This is a debug-level test message.", content)
    assert_not_in_output("This is a debug-level third-party test message.", content)
    assert_in_output("This is an info-level third-party test message.", content)
    assert_in_output("This is a warning-level test message.", content)
    assert_in_output("This is an error-level test message.", content)
    assert_in_output("This is a critical-level test message.", content)
    # buffered after the last WARNING and never flushed
    assert_not_in_output("This is a final debug-level test message.", content)


@pytest.mark.parametrize(
    "env, cli_args",
    [({}, ["--force-flush"]), ({"CHISTOGRAM_FORCE_FLUSH_FLIGHT_RECORDER": "true"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_force_flush(registered_log_demo, runner, fs, env, cli_args):
    """With force-flush (CLI flag or env var) the final DEBUG buffer is written."""
    log_path = "flight_recorder.log"
    result = runner.invoke(chistogram, ["--log-path", log_path] + cli_args + ["log-demo"], env=env)
    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output("This is a final debug-level test message.", content)


@pytest.mark.parametrize(
    "env, cli_args",
    [({}, ["--no-flight-recorder"]), ({"CHISTOGRAM_FLIGHT_RECORDER": "0"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_can_be_disabled(registered_log_demo, runner, fs, env, cli_args):
    """Disabling the flight recorder prevents writing the log file."""
    log_path = "flight_recorder.log"
    result = runner.invoke(chistogram, ["--log-path", log_path] + cli_args + ["log-demo"], env=env)
    assert result.exit_code == 0
    assert not Path(log_path).exists()


def test_flight_recorder_truncates_log(registered_log_demo, runner, fs):
    """The log file is truncated between runs (not appended)."""
    log_path = "flight_recorder.log"
    sizes = []
    for _ in range(2):
        result = runner.invoke(chistogram, ["--log-path", log_path, "log-demo"])
        assert result.exit_code == 0
        with open(log_path, "r", encoding="utf-8") as f:
            sizes.append(sum(1 for _ in f))
    assert sizes[0] == sizes[1]


def test_startup_logging(runner, fs):
    """Startup details end up in the flight recorder."""
    log_path = "startup.log"
    result = runner.invoke(
        chistogram,
        ["--log-path", log_path, "--force-flush", "manifest"],
        env={"CHISTOGRAM_LOGGER_LEVELS": "some.thirdparty=INFO"},
    )
    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output(r"CHISTOGRAM \d+\.\d+\.\d+", content)
    assert_in_output(r"console=WARNING", content)
    assert_in_output(r"flight-recorder=ON", content)
    assert_in_output(r"Python: \d+\.\d+\.\d+", content)
    assert_in_output(r"Platform: .+", content)
    assert_in_output(r"PID: \d+", content)
    assert_in_output(r"CWD: .+", content)
    assert_in_output(r"NumPy: \d+\.\d+\.\d+", content)
    assert_in_output(r"Handlers: .+", content)
    assert_in_output(
        r"Flight recorder: path=startup\.log, capacity=2000, flush_on_close=True",
        content,
    )
    assert_in_output(
        re.escape("Per-logger overrides: {'click_extra': 'WARNING', 'some.thirdparty': 'INFO'}"),
        content,
    )
    assert_in_output(r"Showing manifest of chistogram", content)
