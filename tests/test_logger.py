from libmail.logger import get_logger


def test_default_logger_name():
    logger = get_logger()
    assert logger.name == "libmail"
    assert get_logger("libmail") is logger


def test_library_adds_no_handlers():
    assert get_logger("libmail.mailer").handlers == []
