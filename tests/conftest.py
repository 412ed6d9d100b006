# tests/conftest.py
import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from nut_core.config import NutConfig
from nut_core.core import NutClient


class FakeNutServer:
    """
    进程内的脚本化 NUT 服务器。

    replies 把收到的命令 (不含换行) 映射到应答：
    - bytes: 原样写回；
    - list: 依次处理其中元素，bytes 写回，float 表示先等待若干秒；
    - 未登记的命令不作任何应答 (用于模拟服务器卡死)。
    """

    def __init__(self) -> None:
        self.replies: dict[str, bytes | list] = {}
        self.received: list[str] = []
        self.port = 0
        self._server: asyncio.AbstractServer | None = None
        self._writers: list[asyncio.StreamWriter] = []

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]

    async def stop(self) -> None:
        for writer in self._writers:
            writer.close()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._writers.append(writer)
        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                command = line.decode().removesuffix("\n")
                self.received.append(command)

                reply = self.replies.get(command)
                if reply is None:
                    continue
                steps = reply if isinstance(reply, list) else [reply]
                for step in steps:
                    if isinstance(step, (int, float)):
                        await asyncio.sleep(step)
                    else:
                        writer.write(step)
                        await writer.drain()
        except (ConnectionError, asyncio.CancelledError):
            pass
        finally:
            writer.close()


@pytest_asyncio.fixture
async def nut_server():
    """[Fixture] 已启动的脚本化 NUT 服务器。"""
    server = FakeNutServer()
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def server_config(nut_server) -> NutConfig:
    """[Fixture] 指向 nut_server 的配置，超时较短以便测试。"""
    return NutConfig(
        host="127.0.0.1",
        port=nut_server.port,
        connect_timeout=2.0,
        op_timeout=0.5,
        username="admin",
        password="secret",
    )


@pytest_asyncio.fixture
async def client(server_config):
    """[Fixture] 已连接到 nut_server 的会话。"""
    nut_client = NutClient(server_config)
    await nut_client.connect()
    yield nut_client
    await nut_client.close()


@pytest.fixture
def valid_config() -> NutConfig:
    """[Fixture] 不依赖真实服务器的配置对象。"""
    return NutConfig(
        host="10.10.10.1",
        port=3493,
        connect_timeout=1.0,
        op_timeout=1.0,
        username="monuser",
        password="secret",
    )
