# File: src/nut_core/ups.py
"""
UPS 设备引用。

只保存名称、描述与所属会话；变量与即时命令的查询由上层自行通过
client.send_command() 完成。
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import NutClient


class UPS:
    """绑定到某个会话的 UPS 设备引用。

    Attributes:
        name: upsd 中登记的设备名 (如 "ups1")。
        description: LIST UPS 返回的描述文本，可能为空。
        client: 所属会话，可继续发送针对该设备的命令。
    """

    def __init__(self, name: str, description: str, client: "NutClient") -> None:
        if not name:
            raise ValueError("UPS 名称不能为空")
        self.name = name
        self.description = description
        self.client = client

    def __repr__(self) -> str:
        return f"<UPS name='{self.name}' description='{self.description}'>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UPS):
            return NotImplemented
        return (self.name, self.client) == (other.name, other.client)

    def __hash__(self) -> int:
        return hash((self.name, id(self.client)))
