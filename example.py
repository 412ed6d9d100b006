# example.py
"""
这是一个 nut-core API 的最小示例。

它演示了如何将 nut-core 作为一个库导入到你自己的项目中：
连接 -> 认证 -> 查询版本 -> 列出 UPS -> 登出。

运行此示例：
1. 在根目录创建 .env 文件，至少包含 NUT_HOST (可选 NUT_USERNAME / NUT_PASSWORD)。
2. 安装依赖： pip install -e .
3. 从项目根目录运行： python example.py
"""

import asyncio
import logging
import sys
from pathlib import Path

from nut_core import (
    ConfigError,
    NutClient,
    NutConnectionError,
    NutError,
    ProtocolError,
    SessionStatus,
    load_config_from_env,
)

# 日志配置
logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("NutExample")

ENV_PATH = Path(__file__).resolve().parent / ".env"


def on_status_change(status: SessionStatus, msg: str) -> None:
    print(f">>> 状态变更: {status.name} | 消息: {msg}")


async def main() -> int:
    """
    程序主入口点。
    """
    try:
        config = load_config_from_env(ENV_PATH if ENV_PATH.exists() else None)
    except ConfigError as ce:
        logger.error(f"配置错误: {ce}")
        return 1

    logger.info(f"配置加载完成: {config!r}")

    try:
        # async with 保证任何退出路径上都会登出并关闭连接
        async with NutClient(config, status_callback=on_status_change) as client:
            logger.info(f"服务器版本: {await client.get_version()}")
            logger.info(f"协议版本: {await client.get_network_protocol_version()}")

            if config.has_credentials:
                if not await client.authenticate():
                    logger.warning("认证未通过，继续以匿名身份查询")

            for ups in await client.list_ups():
                logger.info(f"发现 UPS: {ups.name} ({ups.description})")
                status = await client.send_command(f"GET VAR {ups.name} ups.status")
                logger.info(f"  {status[0]}")

    except NutConnectionError as e:
        logger.error(f"无法连接服务器: {e}")
        return 1
    except ProtocolError as pe:
        logger.error(f"服务器拒绝请求: {pe}")
        return 1
    except NutError:
        logger.critical("运行时异常", exc_info=True)
        return 1

    logger.info("示例结束。")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
