"""Error reporting hook for labeling diagnostics."""
import logging
from typing import Callable, Optional

logger = logging.getLogger("blobtrace")

ErrorHook = Callable[[str], None]


def _log_error(message: str) -> None:
    logger.error(message)


_error_hook: ErrorHook = _log_error


def set_error_hook(hook: Optional[ErrorHook]) -> ErrorHook:
    """
    Replace the function receiving diagnostic messages.

    Args:
        hook: Callable taking the message text, or None to restore the
            default hook (log at ERROR level on the ``blobtrace`` logger)

    Returns:
        The previously installed hook
    """
    global _error_hook
    previous = _error_hook
    _error_hook = hook if hook is not None else _log_error
    return previous


def report_error(message: str) -> None:
    """Send a diagnostic message to the current error hook."""
    _error_hook(message)
