import logging.config
import re
from pathlib import Path

import structlog
from decouple import config

# ---------------------------------------------------------------------------
# Remote store (TalkStoque API)
# ---------------------------------------------------------------------------
API_BASE_URL = config("API_BASE_URL", default="http://127.0.0.1:8000")

API_TIMEOUT = config("API_TIMEOUT", default=10.0, cast=float)

# Token persisted between console sessions (``SessionContext.init``)
AUTH_TOKEN_FILE = config(
    "AUTH_TOKEN_FILE",
    default=str(Path.home() / ".talkstoque" / "token"),
    cast=Path,
)

# ---------------------------------------------------------------------------
# Catalog lookup
# ---------------------------------------------------------------------------
SEARCH_DEBOUNCE_SECONDS = config("SEARCH_DEBOUNCE_SECONDS", default=0.5, cast=float)

PRODUCT_SEARCH_LIMIT = config("PRODUCT_SEARCH_LIMIT", default=50, cast=int)

ORDER_SEARCH_LIMIT = config("ORDER_SEARCH_LIMIT", default=10, cast=int)

# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------
# Re-check that the target order is "Enviado" before posting a sale,
# instead of relying only on the shippable-order search.
SALE_REQUIRE_SHIPPED_ORDER = config(
    "SALE_REQUIRE_SHIPPED_ORDER", default=True, cast=bool
)

# ---------------------------------------------------------------------------
# Structured Logging (structlog + stdlib logging)
# ---------------------------------------------------------------------------
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

LOG_JSON = config("LOG_JSON", default=True, cast=bool)

SENSITIVE_PATTERN = re.compile(
    r"(\d{3}\.?\d{3}\.?\d{3}-?\d{2})"  # CPF
    r"|(\d{2}\.?\d{3}\.?\d{3}/?\d{4}-?\d{2})"  # CNPJ
    r"|(password|passwd|secret|token|authorization|bearer)"
    r"""([=:\s]\s*["']?)([^\s,}"']+)""",
    re.IGNORECASE,
)


def mask_sensitive_data(_, __, event_dict):
    """Processor that masks CPF, CNPJ, passwords and tokens in log values."""
    for key, value in list(event_dict.items()):
        if isinstance(value, str):
            event_dict[key] = SENSITIVE_PATTERN.sub("***MASKED***", value)
    return event_dict


# Shared processors used by both structlog and stdlib logging
_shared_processors = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    mask_sensitive_data,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
            "foreign_pre_chain": _shared_processors,
        },
        "console": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.dev.ConsoleRenderer(colors=False),
            ],
            "foreign_pre_chain": _shared_processors,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if LOG_JSON else "console",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "urllib3": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def configure_logging() -> None:
    """Install the structlog pipeline and the stdlib handlers."""
    structlog.configure(
        processors=[
            *_shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(LOGGING)
