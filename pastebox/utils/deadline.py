# pastebox/utils/deadline.py
# Caller-supplied deadlines for service operations

import asyncio
import logging
from functools import wraps
from typing import Callable, Optional

from pastebox.errors import OperationTimeout

logger = logging.getLogger(__name__)


def with_deadline(operation: str):
    """
    Decorator adding an optional ``timeout`` keyword to async functions.

    When the deadline elapses the wrapped coroutine is cancelled, which
    aborts its outstanding store calls; writes already committed stay.

    Usage:
        @with_deadline("create")
        async def create_paste(...):
            ...

        await service.create_paste(..., timeout=2.0)
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, timeout: Optional[float] = None, **kwargs):
            if timeout is None:
                return await func(*args, **kwargs)
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
            except asyncio.TimeoutError as e:
                logger.error(f"Deadline ({timeout}s) exceeded for {operation}")
                raise OperationTimeout(operation, timeout) from e

        return wrapper
    return decorator
