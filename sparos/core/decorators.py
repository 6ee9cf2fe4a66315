"""
Service layer decorators for common functionality.

This module provides the error handling and logging decorator wrapped around
service operations that talk to Bungie.
"""

import functools
import inspect
from typing import Any, Awaitable, Callable, Dict, ParamSpec, Type, TypeVar

import httpx
import structlog

from sparos.core.bungie_api.errors import BungieAPIError, RateLimitError
from sparos.core.exceptions import ResolutionError, UpstreamError

logger = structlog.get_logger(__name__)

# Type variables for generic decorator typing
P = ParamSpec("P")
R = TypeVar("R")


def _build_context(
    func: Callable[..., Any],
    service_name: str,
    include_context: bool,
    args: tuple,
    kwargs: dict,
) -> Dict[str, Any]:
    """Collect service/operation names and call arguments for log context."""
    context: Dict[str, Any] = {
        "service": service_name,
        "operation": func.__name__,
    }
    if not include_context:
        return context

    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()
    for name, value in bound_args.arguments.items():
        if name == "self":
            continue
        # Limit string values to avoid huge log entries
        if isinstance(value, str) and len(value) > 100:
            context[name] = value[:100] + "..."
        else:
            context[name] = str(value)[:200] if value is not None else None
    return context


def service_error_handler(
    service_name: str,
    include_context: bool = True,
    upstream_error_type: Type[ResolutionError] = UpstreamError,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator for handling service method errors with structured logging.

    Resolution errors pass through unchanged. Bungie API errors and transport
    failures that escape the method are converted to ``upstream_error_type``
    so callers only ever see the resolution error taxonomy. Anything else is
    logged and re-raised.

    :param service_name: Name of the service (e.g., "UserResolver")
    :param include_context: Whether to include method parameters in log context
    :param upstream_error_type: Error type used for Bungie/transport failures
    :returns: Decorated coroutine function

    :example:
        @service_error_handler("UserResolver")
        async def resolve(self, query: str) -> Resolution:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        operation_name = func.__name__

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            context = _build_context(
                func, service_name, include_context, args, kwargs
            )

            try:
                logger.debug("Service method called", **context)
                result = await func(*args, **kwargs)
                logger.debug("Service method completed successfully", **context)
                return result

            except ResolutionError as e:
                logger.info(
                    "Service operation ended without a result",
                    error_type=e.__class__.__name__,
                    error_message=e.message,
                    error_context=e.context,
                    **context,
                )
                raise

            except BungieAPIError as e:
                log = logger.warning if isinstance(e, RateLimitError) else logger.error
                log(
                    "Bungie API error in service operation",
                    error_type=e.__class__.__name__,
                    error_message=e.message,
                    status_code=e.status_code,
                    error_code=e.error_code,
                    **context,
                )
                raise upstream_error_type(
                    message=e.message,
                    operation=operation_name,
                    context={"status_code": e.status_code, "error_code": e.error_code},
                    original_error=e,
                ) from e

            except (httpx.RequestError, ConnectionError, TimeoutError) as e:
                logger.error(
                    "External service connectivity error",
                    error_type=type(e).__name__,
                    error_message=str(e),
                    **context,
                )
                raise upstream_error_type(
                    message=f"Request failed: {str(e)}",
                    operation=operation_name,
                    original_error=e,
                ) from e

            except Exception as e:
                logger.error(
                    "Unexpected error in service operation",
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    **context,
                )
                raise

        return wrapper

    return decorator
