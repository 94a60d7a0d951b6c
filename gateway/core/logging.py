# gateway/core/logging.py
import logging.config

from gateway.core.logging_config import build_logging_config


def setup_logging(level: str = "INFO", style: str = "text") -> None:
    logging.config.dictConfig(build_logging_config(level, style))


def mask_token(token: str | None) -> str:
    # session tokens never go to logs in full
    if not token:
        return "-"
    return token[:6] + "…" if len(token) > 6 else "***"
