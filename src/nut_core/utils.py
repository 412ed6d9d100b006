# File: src/nut_core/utils.py
"""
NUT 核心库 - 通用工具

地址解析等与协议无关的辅助函数。
"""

from typing import Tuple


def parse_address(address: str, default_port: int) -> Tuple[str, int]:
    """将 "host[:port]" 拆分为 (host, port)。

    支持的写法:
    - "ups.local"          -> ("ups.local", default_port)
    - "ups.local:3493"     -> ("ups.local", 3493)
    - "[::1]:3493"         -> ("::1", 3493)
    - "[::1]" / "::1"      -> ("::1", default_port)

    未带方括号且含多个冒号的地址视为裸 IPv6 地址，端口取默认值。

    Args:
        address: 主机地址，可带端口。
        default_port: 缺省端口。

    Returns:
        Tuple[str, int]: 主机与端口。

    Raises:
        ValueError: 地址为空、括号不匹配或端口非法。
    """
    address = address.strip()
    if not address:
        raise ValueError("地址不能为空")

    port_text = ""
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep or not host:
            raise ValueError(f"IPv6 地址括号不匹配: {address}")
        if rest:
            if not rest.startswith(":"):
                raise ValueError(f"地址格式无效: {address}")
            port_text = rest[1:]
    elif address.count(":") == 1:
        host, _, port_text = address.partition(":")
    else:
        host = address

    if not host:
        raise ValueError(f"主机名不能为空: {address}")

    if not port_text:
        return host, default_port
    return host, validate_port(port_text)


def validate_port(value: str | int) -> int:
    """校验端口号 (1-65535)。"""
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"端口格式无效: {value}") from None
    if not 0 < port < 65536:
        raise ValueError(f"端口超出范围: {port}")
    return port
