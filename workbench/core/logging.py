import logging
import os
import sys

# 第三方库中过于啰嗦的 logger，统一压到 WARNING
_NOISY_LOGGERS = ("aiosqlite", "asyncio")


def setup_logging(level: str | None = None):
    """
    配置全局日志记录器。

    在 API 入口（workbench.api.server）导入时调用一次；重复调用不会重复添加 handler。

    Args:
        level: 显式指定的日志级别；为空时依次取配置 `LOG_LEVEL`、环境变量、INFO。
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if level is None:
        try:
            from .config import settings  # 延迟导入，避免因配置缺失导致日志不可用

            log_level = settings.log_level.upper()
        except Exception:
            # 配置加载失败时，仍然允许日志系统工作
            pass

    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"无效的日志级别: {log_level}")

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logging.getLogger(__name__).info("日志系统已初始化，级别: %s", log_level)
