# tests/test_framing.py
"""
测试命令分类与响应帧处理 (纯函数，不涉及网络)。
"""

import pytest

from nut_core.exceptions import ProtocolError, UnknownProtocolError
from nut_core.protocols import framing
from nut_core.protocols.framing import ResponseMode


@pytest.mark.parametrize(
    "command, expected_mode",
    [
        ("USERNAME admin", ResponseMode.OK_TERMINATED),
        ("PASSWORD secret", ResponseMode.OK_TERMINATED),
        ("SET VAR ups1 input.transfer.low 95", ResponseMode.OK_TERMINATED),
        ("HELP ME", ResponseMode.OK_TERMINATED),
        ("VER x", ResponseMode.OK_TERMINATED),
        ("NETVER x", ResponseMode.OK_TERMINATED),
        ("LIST UPS", ResponseMode.LIST),
        ("LIST VAR ups1", ResponseMode.LIST),
        # 不带参数时没有结尾空格，不匹配前缀
        ("HELP", ResponseMode.SINGLE_LINE),
        ("VER", ResponseMode.SINGLE_LINE),
        ("NETVER", ResponseMode.SINGLE_LINE),
        ("LIST", ResponseMode.SINGLE_LINE),
        ("GET VAR ups1 ups.status", ResponseMode.SINGLE_LINE),
        ("LOGOUT", ResponseMode.SINGLE_LINE),
        # 区分大小写
        ("list UPS", ResponseMode.SINGLE_LINE),
        ("username admin", ResponseMode.SINGLE_LINE),
        # 前缀必须是完整动词
        ("LISTEN now", ResponseMode.SINGLE_LINE),
        ("SETTINGS x", ResponseMode.SINGLE_LINE),
    ],
)
def test_classify_command(command, expected_mode):
    assert framing.build_command(command).mode is expected_mode


def test_build_command_list_terminator():
    frame = framing.build_command("LIST UPS")
    assert frame.wire == "LIST UPS\n"
    assert frame.terminator == "END LIST UPS\n"
    assert frame.multi_line is True
    assert frame.is_terminator("END LIST UPS\n")
    assert not frame.is_terminator("END LIST UPS")
    assert not frame.is_terminator("END LIST VAR ups1\n")


@pytest.mark.parametrize(
    "raw, first_line, expected",
    [
        ("ERR UNKNOWN-UPS\n", True, True),
        ("BEGIN LIST UPS\n", True, False),
        ("END LIST UPS\n", False, True),
        # 仅首行的 ERR 结束响应
        ("ERR IN-DATA\n", False, False),
    ],
)
def test_list_frame_ends_response(raw, first_line, expected):
    frame = framing.build_command("LIST UPS")
    assert frame.ends_response(raw, first_line) is expected


def test_single_line_frame_always_ends():
    frame = framing.build_command("GET VAR ups1 ups.status")
    assert frame.ends_response("anything\n", True) is True


def test_build_command_ok_terminator_is_single_read():
    frame = framing.build_command("USERNAME admin")
    assert frame.terminator == "OK\n"
    assert frame.multi_line is False


@pytest.mark.parametrize("bad", ["", "VER\nLOGOUT", "VER\r"])
def test_build_command_rejects_invalid(bad):
    with pytest.raises(ValueError):
        framing.build_command(bad)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("OK\n", ["OK"]),
        ("\n", [""]),
        ('UPS ups1 "Test"\n', ['UPS ups1 "Test"']),
        # 内嵌换行的兼容拆分
        ("a\nb\n", ["a", "b"]),
        ("no-newline", ["no-newline"]),
    ],
)
def test_split_line(raw, expected):
    assert framing.split_line(raw) == expected


def test_parse_error_line_known_code():
    err = framing.parse_error_line("ERR ACCESS-DENIED")
    assert isinstance(err, ProtocolError)
    assert err.code == "ACCESS-DENIED"
    assert err.detail == ""


def test_parse_error_line_with_detail():
    err = framing.parse_error_line("ERR INVALID-ARGUMENT bad value here")
    assert err is not None
    assert err.code == "INVALID-ARGUMENT"
    assert err.detail == "bad value here"
    assert "bad value here" in str(err)


def test_parse_error_line_unknown_code():
    err = framing.parse_error_line("ERR SOMETHING-NEW")
    assert isinstance(err, UnknownProtocolError)
    assert err.code == "SOMETHING-NEW"


@pytest.mark.parametrize("line", ["OK", "ERROR", "ERR", "VAR ups1 ups.status OL"])
def test_parse_error_line_not_error(line):
    assert framing.parse_error_line(line) is None


def test_check_response_passes_data_through():
    lines = ["VAR ups1 ups.status \"OL\""]
    assert framing.check_response(lines) is lines


def test_check_response_raises_on_first_line_only():
    with pytest.raises(ProtocolError) as exc_info:
        framing.check_response(["ERR UNKNOWN-COMMAND"])
    assert exc_info.value.code == "UNKNOWN-COMMAND"

    # ERR 只在首行才有意义
    assert framing.check_response(["OK", "ERR X"]) == ["OK", "ERR X"]
