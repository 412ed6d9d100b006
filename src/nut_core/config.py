"""
NUT 核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (可选 .env 文件) 或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigError
from .protocols.constants import ConnConst
from .utils import parse_address, validate_port

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NutConfig:
    """NutClient 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: NUT 服务器主机名或 IP。
        port: NUT 服务器端口 (默认 3493)。
        connect_timeout: 建立 TCP 连接的超时 (秒)。
        op_timeout: 每一次读/写操作的超时 (秒)。
        username: 可选，upsd.users 中的用户名。
        password: 可选，对应的密码。
    """

    host: str
    port: int = ConnConst.DEFAULT_PORT
    connect_timeout: float = ConnConst.DEFAULT_CONNECT_TIMEOUT
    op_timeout: float = ConnConst.DEFAULT_OP_TIMEOUT
    username: str | None = None
    password: str | None = None

    @property
    def address(self) -> str:
        """用于日志显示的 host:port 形式。"""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    def __repr__(self) -> str:
        """
        覆盖默认的 repr，隐藏密码字段，防止日志泄露敏感信息。
        """
        return (
            f"<{self.__class__.__name__} "
            f"server={self.address}, "
            f"username='{self.username}', "
            f"password='******', "
            f"connect_timeout={self.connect_timeout}, "
            f"op_timeout={self.op_timeout}>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> NutConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。
    `host` 可以直接携带端口 ("ups.local:3494")，此时忽略 `port` 字段。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        NutConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:
        # --- 内部辅助函数 ---
        def _req(key: str) -> Any:
            """获取必要字段，缺失则报错"""
            if key not in raw_data or raw_data[key] in (None, ""):
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return raw_data[key]

        def _get(key: str, default: Any) -> Any:
            """获取可选字段，缺失则使用默认值"""
            val = raw_data.get(key)
            return default if val in (None, "") else val

        def _to_timeout(key: str, default: float) -> float:
            val = _get(key, default)
            try:
                timeout = float(val)
            except (TypeError, ValueError):
                raise ConfigError(f"超时格式无效 '{key}': {val}")
            if timeout <= 0:
                raise ConfigError(f"超时必须为正数 '{key}': {val}")
            return timeout

        def _to_optional_str(key: str) -> str | None:
            val = _get(key, None)
            return None if val is None else str(val)

        # --- 地址 ---
        raw_port = _get("port", ConnConst.DEFAULT_PORT)
        try:
            default_port = validate_port(raw_port)
            host, port = parse_address(str(_req("host")), default_port)
        except ValueError as e:
            raise ConfigError(f"地址无效: {e}") from e

        # --- 构建对象 ---
        return NutConfig(
            host=host,
            port=port,
            connect_timeout=_to_timeout(
                "connect_timeout", ConnConst.DEFAULT_CONNECT_TIMEOUT
            ),
            op_timeout=_to_timeout("op_timeout", ConnConst.DEFAULT_OP_TIMEOUT),
            username=_to_optional_str("username"),
            password=_to_optional_str("password"),
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> NutConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [nut]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Returns:
        NutConfig: 配置对象。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    raw_config = {}

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "nut" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [nut] 节，忽略 profile='{profile}'。")
        raw_config = data["nut"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env(dotenv_path: Path | None = None) -> NutConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    自动读取所有以 `NUT_` 开头的相关环境变量，并映射到配置字段。
    例如: `NUT_HOST` -> `host`。

    Args:
        dotenv_path: 可选的 .env 文件。给出时先加载该文件 (覆盖同名变量)。

    Returns:
        NutConfig: 配置对象。

    Raises:
        ConfigError: .env 文件不存在，或未检测到任何相关环境变量。
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise ConfigError(f".env 文件未找到: {dotenv_path}")
        load_dotenv(dotenv_path=dotenv_path, override=True)
        logger.debug(f"已加载 .env 文件: {dotenv_path}")

    # 字段映射表 (Config Field -> Env Suffix)
    env_map = {
        "host": "HOST",
        "port": "PORT",
        "connect_timeout": "CONNECT_TIMEOUT",
        "op_timeout": "OP_TIMEOUT",
        "username": "USERNAME",
        "password": "PASSWORD",
    }

    raw_data = {}

    for cfg_key, env_suffix in env_map.items():
        env_key = f"NUT_{env_suffix}"
        val = os.environ.get(env_key)
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 NUT_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
