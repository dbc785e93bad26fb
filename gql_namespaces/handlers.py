"""
Warning handling utilities for the namespace compiler.

Provides handler functions and type definitions for the non-fatal problems
found while compiling: edges whose parent cannot be found and return types that
cannot be inferred. Includes built-in handlers for common patterns: logging in
development (log_warning, the default), always logging (log_warning_always),
silently continuing (silent_warning) and collecting warnings for batch processing
(collect_warning). Setting no handler at all turns warnings into errors.
"""

import logging
import os
from typing import Callable


logger = logging.getLogger(__name__)


WARNING_HANDLER = Callable[[Warning], None]
"""
Signature for warning handlers.

Warning handlers receive the warning instance. Raising from a handler aborts
the compile call that reported the warning.
"""

ENVIRONMENT_VARIABLE = "GQL_NAMESPACES_ENV"
"""Set to 'production' to silence development warnings from log_warning."""


def is_development() -> bool:
    """True unless GQL_NAMESPACES_ENV is set to 'production'."""
    return os.environ.get(ENVIRONMENT_VARIABLE, "").lower() != "production"


def log_warning(warning: Warning) -> None:
    """Log the warning, unless running in production."""
    if is_development():
        log_warning_always(warning)


def log_warning_always(warning: Warning) -> None:
    logger.warning(f"[gql_namespaces] {warning.__class__.__name__}: {warning}")


def silent_warning(_: Warning) -> None:
    """Silently ignore all warnings."""


warnings_caught = []


def collect_warning(warning: Warning) -> None:
    """
    Record a compile warning instead of logging it.

    Each warning becomes a dict with its category name, message and the
    warning itself, appended to handlers.warnings_caught. The list is never
    cleared here, so clear it between compiles to see only the latest ones.
    """
    warnings_caught.append(
        {
            "category": warning.__class__.__name__,
            "message": str(warning),
            "warning": warning,
        }
    )
