# src/nut_core/protocols/framing.py
"""
NUT 协议层 - 命令帧与响应帧 (Framing)

NUT 线协议的终止规则随动词而变：
- USERNAME/PASSWORD/SET/HELP/VER/NETVER (带参数) 以 "OK\\n" 结束；
- LIST 为多行响应，以 "END <原命令>\\n" 结束；
- 其余命令只读一行。

本模块在发送前对命令做一次分类，由引擎的统一读循环按分类结果驱动。
不包含任何 socket 操作。
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto

from ..exceptions import ProtocolError, error_for_code
from .constants import FrameConst

logger = logging.getLogger(__name__)


class ResponseMode(Enum):
    """响应终止方式。"""

    SINGLE_LINE = auto()
    """只读取一行。"""

    OK_TERMINATED = auto()
    """终止行为 "OK\\n"。服务器实际只回一行，读取方式同 SINGLE_LINE。"""

    LIST = auto()
    """多行响应，读到 "END <原命令>\\n" 为止。"""


@dataclass(frozen=True)
class CommandFrame:
    """一条已分类、待发送的命令。

    Attributes:
        text: 调用方给出的命令文本 (不含换行)。
        wire: 实际写入连接的文本 (含末尾换行)。
        mode: 响应终止方式。
        terminator: 终止行原文 (含换行)。
    """

    text: str
    wire: str
    mode: ResponseMode
    terminator: str

    @property
    def multi_line(self) -> bool:
        return self.mode is ResponseMode.LIST

    def is_terminator(self, raw_line: str) -> bool:
        return raw_line == self.terminator

    def ends_response(self, raw_line: str, first_line: bool) -> bool:
        """读到 raw_line 后是否停止读取。"""
        if not self.multi_line:
            return True
        if first_line and raw_line.startswith(FrameConst.ERR_PREFIX):
            # 服务器拒绝 LIST 时只回一行 ERR，没有 END 行
            return True
        return self.is_terminator(raw_line)


def classify_command(wire: str) -> ResponseMode:
    """按前缀 (区分大小写) 对线上命令分类。"""
    if wire.startswith(FrameConst.OK_TERMINATED_PREFIXES):
        return ResponseMode.OK_TERMINATED
    if wire.startswith(FrameConst.LIST_PREFIX):
        return ResponseMode.LIST
    return ResponseMode.SINGLE_LINE


def build_command(text: str) -> CommandFrame:
    """构建命令帧。

    Args:
        text: 命令文本，如 "LIST UPS"。

    Returns:
        CommandFrame: 含线上文本、终止方式与终止行。

    Raises:
        ValueError: 命令为空或包含换行 (会被服务器当作多条命令)。
    """
    if not text:
        raise ValueError("命令不能为空")
    if "\n" in text or "\r" in text:
        raise ValueError(f"命令中不允许包含换行: {text!r}")

    wire = text + FrameConst.LINE_END
    mode = classify_command(wire)
    if mode is ResponseMode.OK_TERMINATED:
        terminator = FrameConst.OK_LINE
    else:
        terminator = FrameConst.END_PREFIX + wire
    return CommandFrame(text=text, wire=wire, mode=mode, terminator=terminator)


def split_line(raw_line: str) -> list[str]:
    """去掉末尾换行，并按内嵌换行拆分为逻辑行。

    正常服务器不会产生内嵌换行，这里仅作兼容处理。
    """
    clean = raw_line.removesuffix(FrameConst.LINE_END)
    return clean.split(FrameConst.LINE_END)


def parse_error_line(line: str) -> ProtocolError | None:
    """识别 "ERR <CODE>[ <detail>]" 行。

    Returns:
        对应的 ProtocolError 实例；不是错误行时返回 None。
    """
    if not line.startswith(FrameConst.ERR_PREFIX):
        return None
    body = line[len(FrameConst.ERR_PREFIX) :]
    code, _, detail = body.partition(" ")
    logger.debug(f"服务器返回错误: code={code} detail={detail!r}")
    return error_for_code(code, detail)


def check_response(lines: list[str]) -> list[str]:
    """检查已组装的响应，首行为 ERR 时抛出对应异常。

    Raises:
        ProtocolError: 服务器报告错误。
    """
    if lines:
        err = parse_error_line(lines[0])
        if err is not None:
            raise err
    return lines
