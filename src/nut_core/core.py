# File: src/nut_core/core.py
"""
NUT 核心引擎 (Core Engine)

职责：
1. 资源组装：State + Network + Config。
2. 命令收发：分类 -> 发送 -> 统一读循环 -> ERR 检测。
3. 会话流程：Connect -> Authenticate -> Commands -> Logout/Close。

协议严格一问一答，没有请求 ID，同一会话同一时刻只能有一条命令在途。
如需多个调用方共享会话，请在外部加锁串行化。
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from .config import NutConfig, create_config_from_dict
from .exceptions import (
    ConfigError,
    NetworkError,
    NutError,
    ProtocolError,
    StateError,
)
from .network import NetworkClient
from .protocols import auth, framing, listing, logout
from .protocols.constants import ConnConst, Verb
from .state import CommandPhase, NutState, SessionStatus
from .ups import UPS

logger = logging.getLogger(__name__)

# 定义回调函数类型别名：支持同步或异步函数
StatusCallback = Callable[[SessionStatus, str], Any | Awaitable[Any]]
# 由设备名、描述和会话构建设备引用
UPSFactory = Callable[[str, str, "NutClient"], Any]


def _mask(command: str) -> str:
    """日志中隐藏 PASSWORD 参数。"""
    if command.startswith(Verb.PASSWORD + " "):
        return f"{Verb.PASSWORD} ******"
    return command


class NutClient:
    """NUT 协议会话 (Async)。"""

    def __init__(
        self,
        config: NutConfig,
        status_callback: StatusCallback | None = None,
        ups_factory: UPSFactory = UPS,
    ) -> None:
        """初始化会话对象 (尚未连接)。

        Args:
            config: 全局配置对象。
            status_callback: 初始状态回调。也可以之后使用 add_listener 注册。
            ups_factory: list_ups() 用来构建设备引用的工厂。
        """
        self.config = config
        self.ups_factory = ups_factory

        self._listeners: list[StatusCallback] = []
        if status_callback:
            self.add_listener(status_callback)

        try:
            self._state = NutState()
            self.net_client = NetworkClient(config)
        except Exception as e:
            raise ConfigError(f"组件初始化失败: {e}") from e

    @property
    def state(self) -> NutState:
        """获取当前会话状态的只读副本。

        返回的是一个副本 (Copy)，修改它不会影响引擎内部状态。
        """
        return replace(self._state)

    def add_listener(self, callback: StatusCallback) -> None:
        """注册状态变更监听器。"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StatusCallback) -> None:
        """移除状态变更监听器。"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # 连接生命周期
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """建立到 NUT 服务器的连接。

        Raises:
            NutConnectionError: DNS 失败、连接被拒绝或超时。
            StateError: 会话已关闭，或 I/O 失败后连接仍未关闭 (会话不可复用)。
        """
        if self._state.status is SessionStatus.CLOSED:
            raise StateError("会话已关闭，请创建新的 NutClient")
        if self._state.status is SessionStatus.ERROR and self.net_client.is_connected:
            # 旧连接状态不确定，不能在其上重新拨号
            raise StateError("会话处于错误状态，请先 close() 再创建新的 NutClient")
        if self._state.is_usable:
            logger.warning("当前已连接，跳过连接")
            return

        try:
            await self.net_client.connect()
        except NutError as e:
            self._state.last_error = str(e)
            self._update_status(SessionStatus.ERROR, f"连接失败: {e}")
            raise

        self._state.command_phase = CommandPhase.IDLE
        self._update_status(SessionStatus.CONNECTED, f"已连接 {self.config.address}")

    async def close(self) -> None:
        """释放连接，不发送任何协议消息。"""
        if self._state.status is SessionStatus.CLOSED:
            return
        await self.net_client.close()
        self._update_status(SessionStatus.CLOSED, "连接已关闭")

    async def disconnect(self) -> bool:
        """发送 LOGOUT 并关闭连接。

        Returns:
            bool: 服务器确认登出返回 True；其它应答返回 False (非错误)。

        Raises:
            NetworkError: 登出过程中 I/O 失败。
            ProtocolError: 服务器返回 ERR。
        """
        try:
            resp = await self.send_command(logout.build_logout_command())
            confirmed, msg = logout.parse_logout_response(resp)
            if confirmed:
                logger.info(msg)
            else:
                logger.warning(f"登出未确认: {msg}")
            return confirmed
        finally:
            await self.close()

    # ------------------------------------------------------------------
    # 命令收发
    # ------------------------------------------------------------------

    async def send_command(self, command: str) -> list[str]:
        """发送一条命令并返回完整响应。

        Args:
            command: 命令文本 (不含换行)，如 "GET VAR ups1 ups.status"。

        Returns:
            list[str]: 响应行 (已去掉换行)。LIST 命令包含终止行。

        Raises:
            ValueError: 命令为空或含换行。
            StateError: 会话不可用或已有命令在途。
            NetworkError: I/O 失败或超时，已读取的部分响应被丢弃。
            ProtocolError: 服务器返回 ERR。
        """
        frame = framing.build_command(command)
        self._ensure_ready()

        masked = _mask(command)
        self._state.last_command = masked
        self._state.command_phase = CommandPhase.AWAITING_FIRST_LINE
        logger.debug(f">>> {masked} ({frame.mode.name})")

        try:
            await self.net_client.send_line(frame.wire)
            lines = await self._read_response(frame)
        except (NetworkError, asyncio.CancelledError) as e:
            self._state.command_phase = CommandPhase.FAILED
            self._state.last_error = str(e) or e.__class__.__name__
            self._update_status(SessionStatus.ERROR, f"命令 '{masked}' 中断: {e}")
            raise

        self._state.command_phase = CommandPhase.DONE

        try:
            return framing.check_response(lines)
        except ProtocolError as pe:
            self._state.last_error = str(pe)
            logger.debug(f"命令 '{masked}' 被服务器拒绝: {pe}")
            raise

    async def _read_response(self, frame: framing.CommandFrame) -> list[str]:
        """统一读循环：逐行读取，直到满足该命令的终止条件。"""
        response: list[str] = []
        while True:
            raw = await self.net_client.read_line()
            first_line = not response
            response.extend(framing.split_line(raw))
            if frame.ends_response(raw, first_line):
                logger.debug(f"<<< {len(response)} 行")
                return response
            self._state.command_phase = CommandPhase.AWAITING_TERMINATOR

    def _ensure_ready(self) -> None:
        if not self._state.is_usable:
            raise StateError(f"会话不可用 (状态: {self._state.status.name})")
        if self._state.command_in_flight:
            raise StateError(f"上一条命令尚未完成: {self._state.last_command}")

    # ------------------------------------------------------------------
    # 会话流程
    # ------------------------------------------------------------------

    async def authenticate(
        self, username: str | None = None, password: str | None = None
    ) -> bool:
        """执行 USERNAME/PASSWORD 认证。

        未给出参数时使用配置中的凭据。

        Returns:
            bool: 两步均返回 "OK" 时为 True，其它应答为 False。

        Raises:
            ConfigError: 既未传入也未配置凭据。
            ValueError: 用户名或密码包含换行。
            NetworkError: 网络通信异常。
            ProtocolError: 服务器拒绝 (如 ERR INVALID-PASSWORD)。
        """
        username = username if username is not None else self.config.username
        password = password if password is not None else self.config.password
        if not username or not password:
            raise ConfigError("未提供用户名或密码")

        user_cmd = auth.build_username_command(username)
        pass_cmd = auth.build_password_command(password)

        username_resp = await self.send_command(user_cmd)
        password_resp = await self.send_command(pass_cmd)

        if auth.is_accepted(username_resp) and auth.is_accepted(password_resp):
            self._state.username = username
            self._update_status(SessionStatus.AUTHENTICATED, f"认证成功: {username}")
            return True

        logger.warning(
            f"认证未通过: USERNAME -> {username_resp!r}, PASSWORD -> {password_resp!r}"
        )
        return False

    async def list_ups(self) -> list[Any]:
        """列出服务器管理的全部 UPS。

        Returns:
            list: 由 ups_factory 构建的设备引用，顺序与服务器一致。
        """
        resp = await self.send_command(listing.LIST_UPS_COMMAND)
        return [
            self.ups_factory(entry.name, entry.description, self)
            for entry in listing.parse_ups_list(resp)
        ]

    async def help(self) -> str:
        """返回服务器支持的命令列表 (原样一行)。"""
        resp = await self.send_command(Verb.HELP)
        return resp[0]

    async def get_version(self) -> str:
        """返回服务器版本字符串。"""
        resp = await self.send_command(Verb.VER)
        return resp[0]

    async def get_network_protocol_version(self) -> str:
        """返回网络协议版本。"""
        resp = await self.send_command(Verb.NETVER)
        return resp[0]

    # ------------------------------------------------------------------

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._state.is_usable and not self._state.command_in_flight:
            try:
                await self.disconnect()
            except NutError as e:
                logger.warning(f"注销过程异常: {e}")
        await self.close()

    def _update_status(self, status: SessionStatus, msg: str) -> None:
        """更新内部状态并异步触发所有回调。"""
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")

        for callback in self._listeners:
            try:
                if inspect.iscoroutinefunction(callback):
                    asyncio.create_task(callback(status, msg))  # type: ignore
                else:
                    loop = asyncio.get_running_loop()
                    loop.call_soon(callback, status, msg)
            except RuntimeError:
                # loop 尚未运行或已关闭
                pass


async def connect(
    address: str,
    connect_timeout: float = ConnConst.DEFAULT_CONNECT_TIMEOUT,
    op_timeout: float = ConnConst.DEFAULT_OP_TIMEOUT,
    **kwargs: Any,
) -> NutClient:
    """创建会话并连接 (便捷入口)。

    Args:
        address: "host[:port]"，未写端口时使用 3493。
        connect_timeout: 建立连接的超时 (秒)。
        op_timeout: 每次读/写的超时 (秒)。
        **kwargs: 透传给 NutClient，如 status_callback。

    Returns:
        NutClient: 已连接的会话。

    Raises:
        ConfigError: 地址或超时参数无效。
        NutConnectionError: 连接失败。
    """
    config = create_config_from_dict(
        {
            "host": address,
            "connect_timeout": connect_timeout,
            "op_timeout": op_timeout,
        }
    )
    client = NutClient(config, **kwargs)
    await client.connect()
    return client
