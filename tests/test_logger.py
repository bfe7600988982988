import pytest

from cucount.logger import LogLevel, get_log_level, log_message, set_log_level


@pytest.fixture(autouse=True)
def restore_level():
    saved = get_log_level()
    yield
    set_log_level(saved)


def test_default_level_is_info():
    assert get_log_level() is LogLevel.INFO


def test_message_written_with_prefix(capsys):
    log_message(LogLevel.INFO, "value %d\n", 3)
    assert capsys.readouterr().err == "[INFO] value 3\n"


def test_message_below_level_is_suppressed(capsys):
    set_log_level(LogLevel.ERROR)
    log_message(LogLevel.WARN, "hidden\n")
    assert capsys.readouterr().err == ""


def test_error_passes_at_error_level(capsys):
    set_log_level(LogLevel.ERROR)
    log_message(LogLevel.ERROR, "boom\n")
    assert capsys.readouterr().err == "[ERROR] boom\n"


def test_debug_hidden_by_default_and_shown_when_enabled(capsys):
    log_message(LogLevel.DEBUG, "detail\n")
    assert capsys.readouterr().err == ""
    set_log_level(0)
    assert get_log_level() is LogLevel.DEBUG
    log_message(LogLevel.DEBUG, "detail\n")
    assert capsys.readouterr().err == "[DEBUG] detail\n"


def test_format_without_args_is_left_alone(capsys):
    log_message(LogLevel.WARN, "100%")
    assert capsys.readouterr().err == "[WARN] 100%"


def test_invalid_level_rejected():
    with pytest.raises(ValueError):
        set_log_level(7)