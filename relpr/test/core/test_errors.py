from relpr.core.errors import ErrorCode


def test_exit_codes_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.CONFIG_ERROR) == 2
    assert int(ErrorCode.PARSE_ERROR) == 3
    assert int(ErrorCode.REMOTE_ERROR) == 4
    assert int(ErrorCode.TOOL_ERROR) == 7


def test_str_is_readable() -> None:
    assert str(ErrorCode.REMOTE_ERROR) == "remote error"


def test_is_success() -> None:
    assert ErrorCode.OK.is_success is True
    assert ErrorCode.IO_ERROR.is_success is False
