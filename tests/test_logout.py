# tests/test_logout.py
import pytest

from nut_core.protocols import logout


def test_build_logout_command():
    assert logout.build_logout_command() == "LOGOUT"


@pytest.mark.parametrize(
    "response, expected_result_bool, expected_msg_part",
    [
        # 1. 新版服务器
        (["OK Goodbye"], True, "OK Goodbye"),
        # 2. 旧版服务器
        (["Goodbye..."], True, "Goodbye..."),
        # 3. 其它应答: 未确认但不是错误
        (["Invalid argument"], False, "非预期登出响应"),
        (["OK"], False, "非预期登出响应"),
        (["ok goodbye"], False, "非预期登出响应"),
        # 4. 空响应
        ([], False, "未收到响应"),
    ],
)
def test_parse_logout_response(response, expected_result_bool, expected_msg_part):
    """测试登出响应解析"""
    success, msg = logout.parse_logout_response(response)
    assert success is expected_result_bool
    assert expected_msg_part in msg
