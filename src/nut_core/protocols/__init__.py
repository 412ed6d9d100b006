# src/nut_core/protocols/__init__.py
"""
NUT 协议层 (Protocol Layer)

本包负责命令的纯粹构建 (Build) 与响应解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何状态管理 (State)。
- 不依赖于 core 或 network 层。
"""

from . import constants
from .auth import build_password_command, build_username_command, is_accepted
from .framing import (
    CommandFrame,
    ResponseMode,
    build_command,
    check_response,
    classify_command,
    parse_error_line,
    split_line,
)
from .listing import LIST_UPS_COMMAND, UPSEntry, parse_ups_line, parse_ups_list
from .logout import build_logout_command, parse_logout_response

# 公共 API
__all__ = [
    "constants",
    "CommandFrame",
    "ResponseMode",
    "build_command",
    "check_response",
    "classify_command",
    "parse_error_line",
    "split_line",
    "build_username_command",
    "build_password_command",
    "is_accepted",
    "LIST_UPS_COMMAND",
    "UPSEntry",
    "parse_ups_line",
    "parse_ups_list",
    "build_logout_command",
    "parse_logout_response",
]
