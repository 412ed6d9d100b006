# File: src/nut_core/exceptions.py
"""
NUT 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI/GUI）能进行精细的错误处理。
服务器返回的 `ERR <CODE>` 通过可扩展的注册表映射为 ProtocolError。
"""


class NutError(Exception):
    """NUT 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 nut-core 抛出的已知错误。
    """

    pass


class ConfigError(NutError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host)。
    2. 字段格式错误 (如端口越界、超时非正数)。
    3. 找不到配置文件或环境变量。
    """

    pass


class NutConnectionError(NutError):
    """建立连接失败 (Dial 阶段)。

    触发场景:
    1. DNS 解析失败。
    2. 连接被拒绝 (端口未监听)。
    3. 连接超时 (connect_timeout)。

    注意: 本库不会自动重试，是否重连由上层决定。
    """

    pass


class NetworkError(NutError):
    """已建立连接上的 I/O 错误。

    触发场景:
    1. 发送 (write) 或 接收 (read) 超时。
    2. 服务器中途关闭连接。
    3. 物理连接中断。

    注意: 发生此错误后连接状态不确定，应关闭并重新连接。
    """

    pass


class StateError(NutError):
    """会话状态错误 (FSM Violation)。

    触发场景:
    1. 在未连接或已关闭的会话上发送命令。
    2. 上一条命令尚未完成时发起新命令。
    """

    pass


class ProtocolError(NutError):
    """服务器返回的协议错误 (`ERR <CODE>`)。

    这是正常的业务结果而非故障，例如密码错误、UPS 不存在等。

    Attributes:
        code: 服务器返回的原始错误码，如 "ACCESS-DENIED"。
        detail: 错误码之后的附加说明 (可能为空)。
    """

    def __init__(self, code: str, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        message = f"{code}: {self.description}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def description(self) -> str:
        """获取错误码对应的人类可读中文描述。"""
        entry = _ERROR_REGISTRY.get(self.code)
        if entry is None:
            return f"未知协议错误 (Code: {self.code})"
        return entry[1]


class UnknownProtocolError(ProtocolError):
    """未在注册表中登记的错误码。

    新版本服务器引入的错误码会落到此类型，而不会导致解析失败。
    """

    pass


# 错误码 -> (异常类型, 中文描述)
_ERROR_REGISTRY: dict[str, tuple[type[ProtocolError], str]] = {}


def register_error_code(
    code: str,
    description: str,
    exc_class: type[ProtocolError] = ProtocolError,
) -> None:
    """登记 (或覆盖) 一个服务器错误码。

    Args:
        code: 服务器返回的错误码，区分大小写。
        description: 人类可读描述。
        exc_class: 抛出时使用的异常类型，必须是 ProtocolError 的子类。

    Raises:
        TypeError: exc_class 不是 ProtocolError 的子类。
        ValueError: code 为空或包含空白字符。
    """
    if not isinstance(exc_class, type) or not issubclass(exc_class, ProtocolError):
        raise TypeError(f"exc_class 必须是 ProtocolError 的子类: {exc_class!r}")
    if not code or any(ch.isspace() for ch in code):
        raise ValueError(f"错误码格式无效: {code!r}")
    _ERROR_REGISTRY[code] = (exc_class, description)


def error_for_code(code: str, detail: str = "") -> ProtocolError:
    """根据错误码构建对应的异常对象 (不抛出)。

    未登记的错误码返回 UnknownProtocolError。
    """
    entry = _ERROR_REGISTRY.get(code)
    if entry is None:
        return UnknownProtocolError(code, detail)
    exc_class, _ = entry
    return exc_class(code, detail)


class AuthenticationRequiredError(ProtocolError):
    """需要先执行 USERNAME/PASSWORD 认证。"""

    pass


class AccessDeniedError(ProtocolError):
    """账号无权执行该操作。"""

    pass


class CredentialError(ProtocolError):
    """用户名或密码被服务器拒绝。"""

    pass


class UnknownUPSError(ProtocolError):
    """指定的 UPS 不存在。"""

    pass


# NUT 网络协议 (docs/net-protocol.txt) 中定义的标准错误码
for _code, _desc, _cls in (
    ("ACCESS-DENIED", "访问被拒绝 (账号无此权限)", AccessDeniedError),
    ("UNKNOWN-UPS", "UPS 不存在", UnknownUPSError),
    ("VAR-NOT-SUPPORTED", "该 UPS 不支持此变量", ProtocolError),
    ("CMD-NOT-SUPPORTED", "该 UPS 不支持此即时命令", ProtocolError),
    ("INVALID-ARGUMENT", "命令参数无效", ProtocolError),
    ("INSTCMD-FAILED", "即时命令执行失败", ProtocolError),
    ("SET-FAILED", "变量设置失败", ProtocolError),
    ("READONLY", "变量为只读", ProtocolError),
    ("TOO-LONG", "取值超出长度限制", ProtocolError),
    ("FEATURE-NOT-SUPPORTED", "服务器不支持该特性", ProtocolError),
    ("FEATURE-NOT-CONFIGURED", "服务器未配置该特性", ProtocolError),
    ("ALREADY-SSL-MODE", "连接已处于 SSL 模式", ProtocolError),
    ("DRIVER-NOT-CONNECTED", "服务器与 UPS 驱动失去连接", ProtocolError),
    ("DATA-STALE", "UPS 数据已过期", ProtocolError),
    ("ALREADY-LOGGED-IN", "已对该 UPS 执行过 LOGIN", ProtocolError),
    ("INVALID-PASSWORD", "密码错误", CredentialError),
    ("ALREADY-SET-PASSWORD", "本会话已设置过密码", ProtocolError),
    ("INVALID-USERNAME", "用户名无效", CredentialError),
    ("ALREADY-SET-USERNAME", "本会话已设置过用户名", ProtocolError),
    ("USERNAME-REQUIRED", "需要先提供用户名", AuthenticationRequiredError),
    ("PASSWORD-REQUIRED", "需要先提供密码", AuthenticationRequiredError),
    ("UNKNOWN-COMMAND", "服务器无法识别该命令", ProtocolError),
    ("INVALID-VALUE", "取值无效", ProtocolError),
):
    register_error_code(_code, _desc, _cls)
