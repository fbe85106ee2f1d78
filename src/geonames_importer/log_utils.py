"""日志配置。"""

import logging

import structlog


def configure_structlog(log_level: int = logging.INFO):
    """配置 structlog，输出到标准输出。

    Args:
        log_level: 日志级别，例如 logging.INFO、logging.WARNING
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
