"""Decorators applied to every MCP tool at registration.

functools.wraps keeps the wrapped signature visible to FastMCP, so tool
parameters are still introspected from the original function.
"""

import functools
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional


ToolFunc = Callable[..., Awaitable[Dict[str, Any]]]


def exception_handler(func: ToolFunc) -> ToolFunc:
    """Turn uncaught tool exceptions into an error result."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logging.getLogger(func.__module__).exception(f"Tool {func.__name__} failed")
            return {
                "success": False,
                "error": f"{type(e).__name__}: {e}",
            }

    return wrapper


def tool_logger(func: ToolFunc, config: Optional[Dict[str, Any]] = None) -> ToolFunc:
    """Log tool invocation and duration."""
    server_name = (config or {}).get("name", "gundem_feed")

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        arguments = {k: v for k, v in kwargs.items() if k != "ctx"}
        logger.info(f"[{server_name}] {func.__name__} called with {arguments}")

        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(f"[{server_name}] {func.__name__} finished in {elapsed_ms:.1f} ms")

    return wrapper
