# File: src/nut_core/state.py
"""
NUT 核心库 - 状态模块

负责定义和存储所有易变的会话状态。
本模块不包含业务逻辑，仅作为数据容器供 Core 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class SessionStatus(Enum):
    """会话的生命周期状态枚举。

    状态流转示意:
    IDLE -> CONNECTED -> AUTHENTICATED -> CLOSED
              |              |
              v              v
            ERROR          ERROR
    """

    IDLE = auto()
    """初始状态，客户端已实例化但尚未连接。"""

    CONNECTED = auto()
    """TCP 连接已建立，可以发送命令。"""

    AUTHENTICATED = auto()
    """USERNAME/PASSWORD 均已被服务器接受。"""

    CLOSED = auto()
    """已登出或连接已关闭，会话不可再用。"""

    ERROR = auto()
    """I/O 失败，连接状态不确定，应关闭后重新连接。"""


class CommandPhase(Enum):
    """单条命令的收发阶段。

    IDLE -> AWAITING_FIRST_LINE -> (AWAITING_TERMINATOR) -> DONE
    任意阶段发生 I/O 错误或超时 -> FAILED
    """

    IDLE = auto()
    AWAITING_FIRST_LINE = auto()
    AWAITING_TERMINATOR = auto()
    DONE = auto()
    FAILED = auto()


@dataclass
class NutState:
    """存储 NUT 会话的易变状态数据。

    Attributes:
        status: 当前会话状态。
        command_phase: 当前 (或最近一条) 命令所处阶段。
        last_command: 最近一次发送的命令 (PASSWORD 参数已打码)。
        last_error: 最近一次发生的错误信息描述，用于 UI 显示。
        username: 认证成功后的用户名。
    """

    status: SessionStatus = SessionStatus.IDLE
    command_phase: CommandPhase = CommandPhase.IDLE
    last_command: str = ""
    last_error: str = ""
    username: str = ""

    @property
    def is_usable(self) -> bool:
        """会话是否可以发送命令。"""
        return self.status in (SessionStatus.CONNECTED, SessionStatus.AUTHENTICATED)

    @property
    def command_in_flight(self) -> bool:
        return self.command_phase in (
            CommandPhase.AWAITING_FIRST_LINE,
            CommandPhase.AWAITING_TERMINATOR,
        )
