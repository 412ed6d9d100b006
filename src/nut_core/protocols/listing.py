# src/nut_core/protocols/listing.py
"""
LIST UPS 响应解析。

每个设备一行：UPS <name> "<description>"
"""

import logging
from typing import NamedTuple

from .constants import ReplyConst, Verb

logger = logging.getLogger(__name__)

LIST_UPS_COMMAND = f"{Verb.LIST} UPS"


class UPSEntry(NamedTuple):
    name: str
    description: str


def parse_ups_line(line: str) -> UPSEntry | None:
    """解析单行 UPS 记录，非 "UPS " 开头的行返回 None。

    名称为 "UPS " 与第一个双引号之间的文本，去掉一个结尾空格。
    """
    if not line.startswith(ReplyConst.UPS_LINE_PREFIX):
        return None

    body = line[len(ReplyConst.UPS_LINE_PREFIX) :]
    parts = body.split(ReplyConst.DESCRIPTION_QUOTE)
    name = parts[0].removesuffix(" ")
    if not name:
        logger.warning(f"忽略缺少设备名的行: {line!r}")
        return None
    description = parts[1] if len(parts) > 1 else ""
    return UPSEntry(name=name, description=description)


def parse_ups_list(response: list[str]) -> list[UPSEntry]:
    """从 LIST UPS 的完整响应中按顺序提取设备。"""
    entries = []
    for line in response:
        entry = parse_ups_line(line)
        if entry is not None:
            entries.append(entry)
    logger.debug(f"LIST UPS 解析出 {len(entries)} 台设备")
    return entries
