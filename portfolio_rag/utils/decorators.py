"""
Utility decorators for the RAG system.

Provides timing, bounded retry and error wrapping for both plain functions
and coroutines.
"""

import asyncio
import functools
import inspect
import time
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from portfolio_rag.utils.exceptions import RAGException
from portfolio_rag.utils.logging import get_logger


def timing_decorator(func: Callable) -> Callable:
    """
    Decorator to measure function execution time.

    Args:
        func: Function or coroutine function to be timed

    Returns:
        Wrapped function with timing
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            execution_time = time.perf_counter() - start_time
            logger.error(f"❌ {func.__name__} failed after {execution_time:.3f}s: {str(e)}")
            raise
        execution_time = time.perf_counter() - start_time
        logger.info(f"⏱️ {func.__name__} executed in {execution_time:.3f}s")
        return result

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time = time.perf_counter() - start_time
            logger.error(f"❌ {func.__name__} failed after {execution_time:.3f}s: {str(e)}")
            raise
        execution_time = time.perf_counter() - start_time
        logger.info(f"⏱️ {func.__name__} executed in {execution_time:.3f}s")
        return result

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper


async def retry_async(
    operation: Callable[[], Awaitable[Any]],
    *,
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    description: Optional[str] = None
) -> Any:
    """
    Await ``operation`` until it succeeds or the retry budget is spent.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        max_retries: Attempts allowed after the first one
        delay: Initial delay between attempts in seconds
        backoff: Multiplier applied to the delay after each failure
        retry_on: Exception types that trigger another attempt
        description: Name used in log lines

    Returns:
        The operation's result

    Raises:
        The last exception once ``max_retries`` is exhausted
    """
    logger = get_logger(__name__)
    name = description or getattr(operation, "__name__", "operation")
    wait = delay

    for attempt in range(max_retries + 1):
        try:
            return await operation()
        except retry_on as e:
            if attempt == max_retries:
                if max_retries:
                    logger.error(f"❌ {name} failed after {max_retries} retries: {str(e)}")
                raise

            logger.warning(f"⚠️ {name} attempt {attempt + 1} failed: {str(e)}. Retrying in {wait:.2f}s...")
            if wait > 0:
                await asyncio.sleep(wait)
            wait *= backoff


def error_handler_decorator(exception_type: Type[RAGException] = RAGException):
    """
    Decorator translating unexpected exceptions into a domain exception.

    Args:
        exception_type: Type of exception to raise

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except exception_type as e:
                logger = get_logger(func.__module__)
                logger.error(f"❌ {func.__name__} failed: {str(e)}")
                raise
            except Exception as e:
                logger = get_logger(func.__module__)
                logger.error(f"❌ Unexpected error in {func.__name__}: {str(e)}")
                raise exception_type(f"Unexpected error in {func.__name__}: {str(e)}") from e

        return wrapper
    return decorator
