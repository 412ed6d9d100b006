# src/nut_core/network.py
"""
NUT 核心库 - 网络模块 (Network) [Asyncio Edition]

封装 TCP 连接的建立、按行发送和接收逻辑。
每一次读/写都单独施加 op_timeout，多行响应的总耗时不受限制，
但任何一次读取都不能停滞超过该时限。
"""

import asyncio
import logging
from typing import Optional

from .config import NutConfig
from .exceptions import NetworkError, NutConnectionError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class NetworkClient:
    """
    封装 asyncio TCP 流的客户端。
    """

    def __init__(self, config: NutConfig):
        self.config = config
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """
        建立 TCP 连接，受 connect_timeout 约束。
        """
        host, port = self.config.host, self.config.port
        timeout = self.config.connect_timeout

        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=timeout
            )
            logger.debug(f"TCP 连接已建立: {self.config.address}")

        except asyncio.TimeoutError:
            await self.close()
            raise NutConnectionError(
                f"连接超时 {self.config.address} ({timeout}s)"
            ) from None
        except OSError as e:
            # 包括 ConnectionRefusedError 与 socket.gaierror (DNS)
            await self.close()
            raise NutConnectionError(f"连接失败 {self.config.address}: {e}") from e

    async def send_line(self, line: str) -> None:
        """
        发送一行文本 (调用方负责末尾换行)。
        """
        if not self.is_connected:
            raise NetworkError("连接未建立或已关闭")

        # 显式断言：此时 writer 绝不可能是 None
        assert self.writer is not None

        try:
            self.writer.write(line.encode(ENCODING))
            await asyncio.wait_for(
                self.writer.drain(), timeout=self.config.op_timeout
            )
        except asyncio.TimeoutError:
            raise NetworkError(f"发送超时 ({self.config.op_timeout}s)") from None
        except (OSError, RuntimeError) as e:
            raise NetworkError(f"发送失败: {e}") from e

    async def read_line(self) -> str:
        """
        读取一行以换行结尾的文本 (保留换行)。

        使用 asyncio.wait_for 实现单次读取的超时控制。
        """
        if self.reader is None:
            raise NetworkError("连接未建立")

        try:
            raw = await asyncio.wait_for(
                self.reader.readline(), timeout=self.config.op_timeout
            )
        except asyncio.TimeoutError:
            raise NetworkError(f"接收超时 ({self.config.op_timeout}s)") from None
        except (OSError, ValueError) as e:
            # ValueError: 单行超过 StreamReader 缓冲上限
            raise NetworkError(f"接收错误: {e}") from e

        if not raw.endswith(b"\n"):
            # readline 在 EOF 时返回空串或不完整的行
            raise NetworkError("连接已被服务器关闭")

        return raw.decode(ENCODING, errors="replace")

    async def close(self) -> None:
        """关闭连接"""
        writer = self.writer
        self.writer = None
        self.reader = None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"关闭连接时出现异常 (已忽略): {e}")
        logger.debug("TCP 连接已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
