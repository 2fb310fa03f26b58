"""
Logging setup shared by the storefront services
"""
import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    # structlog 설정 (JSON 한 줄 로그, ISO 타임스탬프)
    min_level = logging.getLevelName(level.upper())
    if not isinstance(min_level, int):
        min_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
