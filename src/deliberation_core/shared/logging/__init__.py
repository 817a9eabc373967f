from deliberation_core.shared.logging.setup import setup_logging
from deliberation_core.shared.logging.structured import (
    ContextualLogger,
    JSONFormatter,
    get_contextual_logger,
)

__all__ = [
    "ContextualLogger",
    "JSONFormatter",
    "get_contextual_logger",
    "setup_logging",
]
