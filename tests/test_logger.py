import pytest

from videopipe import logger
from videopipe.logger import FatalError, LogLevel, Logger
from videopipe.timeutil import date_now


@pytest.fixture
def restore_level():
    old = logger.get_log_level()
    yield
    logger.set_log_level(old)


@pytest.mark.parametrize(
    "level, name",
    [
        (LogLevel.DEBUG, "debug"),
        (LogLevel.VERBOSE, "verbo"),
        (LogLevel.INFO, "info"),
        (LogLevel.WARNING, "warn"),
        (LogLevel.ERROR, "error"),
        (LogLevel.FATAL, "fatal"),
        (42, "unknow"),
    ],
)
def test_level_string(level, name):
    assert logger.level_string(level) == name


def test_remove_color_text():
    assert logger.remove_color_text("[\033[31merror\033[0m]") == "[error]"


def test_remove_color_text_without_terminator():
    assert logger.remove_color_text("a\033[31b") == "a\033[31b"


def test_set_save_directory_adds_separator():
    lg = Logger()
    lg.set_save_directory("/var/logs")
    assert lg.directory == "/var/logs/"
    lg.set_save_directory("")
    assert lg.directory == "./"


def test_logger_writes_file_on_close(tmp_path):
    lg = Logger(str(tmp_path / "logs"))
    lg.write("first")
    lg.write("second")
    lg.close()
    path = tmp_path / "logs" / f"{date_now()}.txt"
    assert path.read_text() == "first\nsecond\n"


def test_logger_flush_appends(tmp_path):
    lg = Logger(str(tmp_path))
    lg.write("one")
    lg.flush()
    lg.write("two")
    lg.close()
    path = tmp_path / f"{date_now()}.txt"
    assert path.read_text().splitlines() == ["one", "two"]


def test_logger_ignores_writes_after_close(tmp_path):
    lg = Logger(str(tmp_path))
    lg.close()
    lg.write("late")
    lg.flush()
    assert not (tmp_path / f"{date_now()}.txt").exists()


def test_log_info_to_stdout(capsys, restore_level):
    logger.set_log_level(LogLevel.INFO)
    text = logger.log(LogLevel.INFO, "hello", "/src/main.cpp", 12)
    assert text.endswith("[main.cpp:12]:hello")
    assert "info" in text
    assert text in capsys.readouterr().out


def test_log_filtered_by_level(capsys, restore_level):
    logger.set_log_level(LogLevel.INFO)
    assert logger.log(LogLevel.DEBUG, "hidden", "x.cpp", 1) is None
    assert capsys.readouterr().out == ""


def test_log_level_change(restore_level):
    logger.set_log_level(LogLevel.DEBUG)
    assert logger.get_log_level() == LogLevel.DEBUG
    assert logger.log(LogLevel.DEBUG, "shown", "x.cpp", 2).endswith("[x.cpp:2]:shown")


def test_log_error_to_stderr(capsys, restore_level):
    logger.set_log_level(LogLevel.INFO)
    logger.log(LogLevel.ERROR, "boom", "e.cpp", 3)
    captured = capsys.readouterr()
    assert "[e.cpp:3]:boom" in captured.err
    assert captured.out == ""


def test_log_fatal_raises(capsys, restore_level):
    with pytest.raises(FatalError):
        logger.log(LogLevel.FATAL, "dead", "f.cpp", 4)
    assert "[f.cpp:4]:dead" in capsys.readouterr().err