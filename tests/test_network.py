# tests/test_network.py
import asyncio
import socket

import pytest

from nut_core.config import NutConfig
from nut_core.network import NetworkClient, NetworkError, NutConnectionError


def _free_port() -> int:
    """获取一个当前无人监听的本地端口"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.mark.asyncio
async def test_network_connect_and_close(server_config):
    client = NetworkClient(server_config)
    await client.connect()
    assert client.is_connected

    await client.close()
    assert not client.is_connected
    # 重复关闭不报错
    await client.close()


@pytest.mark.asyncio
async def test_network_connect_refused():
    config = NutConfig(host="127.0.0.1", port=_free_port(), connect_timeout=1.0)
    client = NetworkClient(config)

    with pytest.raises(NutConnectionError, match="连接失败"):
        await client.connect()
    assert not client.is_connected


@pytest.mark.asyncio
async def test_network_connect_dns_failure():
    config = NutConfig(host="no-such-host.invalid", connect_timeout=2.0)

    with pytest.raises(NutConnectionError):
        await NetworkClient(config).connect()


@pytest.mark.asyncio
async def test_network_connect_timeout(mocker):
    async def never_connects(*args, **kwargs):
        await asyncio.sleep(10)

    mocker.patch("nut_core.network.asyncio.open_connection", side_effect=never_connects)
    config = NutConfig(host="10.255.255.1", connect_timeout=0.1)

    with pytest.raises(NutConnectionError, match="连接超时"):
        await NetworkClient(config).connect()


@pytest.mark.asyncio
async def test_network_send_and_read_line(nut_server, server_config):
    nut_server.replies["VER"] = b"NUT Server 2.8.0\n"

    async with NetworkClient(server_config) as client:
        await client.send_line("VER\n")
        assert await client.read_line() == "NUT Server 2.8.0\n"

    assert nut_server.received == ["VER"]


@pytest.mark.asyncio
async def test_network_receive_timeout(nut_server, server_config):
    # 服务器对未登记的命令不作应答
    async with NetworkClient(server_config) as client:
        await client.send_line("SILENT\n")
        with pytest.raises(NetworkError, match="超时"):
            await client.read_line()


@pytest.mark.asyncio
async def test_network_deadline_is_per_read(nut_server, server_config):
    """总耗时超过 op_timeout，但每次读取都在时限内完成。"""
    nut_server.replies["SLOW"] = [0.3, b"one\n", 0.3, b"two\n", 0.3, b"three\n"]

    async with NetworkClient(server_config) as client:
        await client.send_line("SLOW\n")
        lines = [await client.read_line() for _ in range(3)]

    assert lines == ["one\n", "two\n", "three\n"]


@pytest.mark.asyncio
async def test_network_eof_is_error(nut_server, server_config):
    async with NetworkClient(server_config) as client:
        await nut_server.stop()
        with pytest.raises(NetworkError, match="关闭"):
            await client.read_line()


@pytest.mark.asyncio
async def test_network_partial_line_at_eof_is_error(nut_server, server_config):
    nut_server.replies["PARTIAL"] = b"no newline"

    async with NetworkClient(server_config) as client:
        await client.send_line("PARTIAL\n")
        await asyncio.sleep(0.05)
        await nut_server.stop()
        with pytest.raises(NetworkError, match="关闭"):
            await client.read_line()


@pytest.mark.asyncio
async def test_network_send_when_closed(server_config):
    client = NetworkClient(server_config)
    with pytest.raises(NetworkError, match="未建立"):
        await client.send_line("VER\n")
    with pytest.raises(NetworkError, match="未建立"):
        await client.read_line()
