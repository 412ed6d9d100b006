# src/nut_core/protocols/logout.py
import logging
from typing import Tuple

from .constants import ReplyConst, Verb

logger = logging.getLogger(__name__)


def build_logout_command() -> str:
    """构建 LOGOUT 命令。"""
    return Verb.LOGOUT


def parse_logout_response(response: list[str]) -> Tuple[bool, str]:
    """解析 LOGOUT 响应。

    两种服务器拼写 ("OK Goodbye" / "Goodbye...") 视为确认；
    其它应答视为未确认，但不作为错误处理。
    """
    if not response:
        return False, "未收到响应"

    line = response[0]
    if line in ReplyConst.LOGOUT_CONFIRMED:
        return True, f"服务器确认登出 ({line})"
    return False, f"非预期登出响应: {line!r}"
