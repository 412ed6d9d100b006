# src/nut_core/protocols/constants.py
"""
NUT 协议层 - 常量定义

本模块定义了所有协议相关的固定值：默认端口、动词、终止行与服务器应答。
采用命名空间 (Class Namespace) 组织，不使用扁平全局变量。
"""

# =========================================================================
# 1. 连接参数 (Connection)
# =========================================================================


class ConnConst:
    DEFAULT_PORT = 3493
    DEFAULT_CONNECT_TIMEOUT = 5.0  # 秒
    DEFAULT_OP_TIMEOUT = 5.0  # 秒，单次读/写


# =========================================================================
# 2. 命令动词与帧格式 (Framing)
# =========================================================================


class Verb:
    USERNAME = "USERNAME"
    PASSWORD = "PASSWORD"
    SET = "SET"
    HELP = "HELP"
    VER = "VER"
    NETVER = "NETVER"
    LIST = "LIST"
    LOGOUT = "LOGOUT"


class FrameConst:
    LINE_END = "\n"
    ERR_PREFIX = "ERR "
    END_PREFIX = "END "
    OK_LINE = "OK\n"

    # 以 "OK\n" 结束的命令前缀 (含动词后的空格，区分大小写)
    OK_TERMINATED_PREFIXES = (
        Verb.USERNAME + " ",
        Verb.PASSWORD + " ",
        Verb.SET + " ",
        Verb.HELP + " ",
        Verb.VER + " ",
        Verb.NETVER + " ",
    )

    # 以 "END <原命令>" 结束的多行命令前缀
    LIST_PREFIX = Verb.LIST + " "


# =========================================================================
# 3. 会话应答 (Replies)
# =========================================================================


class ReplyConst:
    OK = "OK"

    # 不同版本服务器的两种拼写
    LOGOUT_CONFIRMED = ("OK Goodbye", "Goodbye...")

    UPS_LINE_PREFIX = "UPS "
    DESCRIPTION_QUOTE = '"'
