# src/nut_core/__init__.py
"""
Nut-Core v1.0.0
基于 asyncio 的 Network UPS Tools (NUT) 协议客户端核心库。
"""

# 暴露核心配置
from .config import (
    NutConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露引擎与状态
from .core import NutClient, connect

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    ConfigError,
    CredentialError,
    NetworkError,
    NutConnectionError,
    NutError,
    ProtocolError,
    StateError,
    UnknownProtocolError,
    UnknownUPSError,
    error_for_code,
    register_error_code,
)
from .state import CommandPhase, NutState, SessionStatus
from .ups import UPS

__version__ = "1.0.0"

__all__ = [
    "NutClient",
    "connect",
    "NutConfig",
    "NutState",
    "SessionStatus",
    "CommandPhase",
    "UPS",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "NutError",
    "ConfigError",
    "NutConnectionError",
    "NetworkError",
    "StateError",
    "ProtocolError",
    "UnknownProtocolError",
    "AccessDeniedError",
    "AuthenticationRequiredError",
    "CredentialError",
    "UnknownUPSError",
    "error_for_code",
    "register_error_code",
]
