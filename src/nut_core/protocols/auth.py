# src/nut_core/protocols/auth.py
from .constants import ReplyConst, Verb


def build_username_command(username: str) -> str:
    """构建 USERNAME 命令。"""
    if not username or "\n" in username or "\r" in username:
        raise ValueError(f"用户名不能为空且不能包含换行: {username!r}")
    return f"{Verb.USERNAME} {username}"


def build_password_command(password: str) -> str:
    """构建 PASSWORD 命令。"""
    if not password or "\n" in password or "\r" in password:
        raise ValueError("密码不能为空且不能包含换行")
    return f"{Verb.PASSWORD} {password}"


def is_accepted(response: list[str]) -> bool:
    """认证步骤的应答必须恰好是一行 "OK"。"""
    return len(response) == 1 and response[0] == ReplyConst.OK
