# gateway/core/logging_config.py
import structlog

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def make_json_formatter() -> structlog.stdlib.ProcessorFormatter:
    """One JSON object per line (LOG_STYLE=json) for plain stdlib log records."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )


def build_logging_config(level: str = "INFO", style: str = "text") -> dict:
    formatter = "json" if style == "json" else "default"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": TEXT_FORMAT},
            "json": {"()": make_json_formatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": formatter,
            },
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
        # httpx logs every request at INFO
        "loggers": {
            "httpx": {"level": "WARNING"},
        },
    }
