"""Error taxonomy and graceful-degradation helpers.

- TransportError: the backend could not be reached or refused the call
  (network, auth, quota). Never recovered locally.
- SchemaValidationError: the backend answered, but the answer does not match
  the declared response contract. Never coerced or defaulted.

Optional results that are legitimately missing (e.g. no image part) are not
errors at all and are represented as None.
"""

from typing import Any, Optional

from sous_chef.utils.logger import logger


class GenerationError(Exception):
    """Base class for failures surfaced by the generation core."""


class TransportError(GenerationError):
    """Network, authentication or quota failure while calling a backend."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SchemaValidationError(GenerationError, ValueError):
    """Backend response failed local schema validation."""

    def __init__(self, message: str, contract: str = "", errors: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.contract = contract
        self.errors = errors or []


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log a recovered failure.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: "warning" for expected degradation, "error" for bugs in caller code.
    """
    msg = f"{operation_name}: {exception}"
    extra = {"operation": operation_name}
    if log_level == "error":
        logger.error(msg, exc_info=exception, extra=extra)
    else:
        logger.warning(msg, extra=extra)


async def safe_execute_async(
    coro,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Safely execute async operation with consistent error logging.

    Used for optional operations that should degrade gracefully, such as the
    dish photo generated next to a recipe.

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Dish image generation").
        log_level: Logging level ("warning" or "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.

    Returns:
        Result of coroutine if successful, default_return on exception.
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return


def safe_execute_sync(
    func,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Synchronous version of safe_execute_async. Same behavior and patterns.

    Args:
        func: Callable to execute (no args).
        operation_name: Description for logging.
        log_level: Logging level ("warning" or "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.

    Returns:
        Result of func if successful, default_return on exception.
    """
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return
