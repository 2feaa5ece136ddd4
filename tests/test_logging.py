import logging

from sensorctl.index import setup_logging
from sensorctl.utils.index import SUCCESS, ConsoleFormatter, log_message


def record(level, message="hello"):
    return logging.LogRecord("sensorctl", level, __file__, 1, message, None, None)


def test_plain_markers():
    formatter = ConsoleFormatter(use_color=False)

    assert formatter.format(record(logging.INFO)) == "> hello"
    assert formatter.format(record(SUCCESS)) == "✔ hello"
    assert formatter.format(record(logging.WARNING)) == "! hello"
    assert formatter.format(record(logging.ERROR)) == "✕ hello"


def test_colored_error_line():
    line = ConsoleFormatter(use_color=True).format(record(logging.ERROR))
    assert line == "\033[31m✕ hello\033[0m"


def test_log_message_levels(caplog):
    caplog.set_level(logging.DEBUG, logger="sensorctl")

    log_message("info line")
    log_message("done", "SUCCESS")
    log_message("bad", "ERROR")

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.INFO, "info line"),
        (SUCCESS, "done"),
        (logging.ERROR, "bad"),
    ]


def test_errors_go_to_stderr(capsys):
    setup_logging("INFO")

    log_message("to stdout")
    log_message("to stderr", "ERROR")
    log_message("hidden", "DEBUG")

    captured = capsys.readouterr()
    assert "> to stdout" in captured.out
    assert "to stderr" not in captured.out
    assert "✕ to stderr" in captured.err
    assert "hidden" not in captured.out
