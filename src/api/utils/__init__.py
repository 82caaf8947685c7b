"""Helpers shared by the API routers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import Request

T = TypeVar("T")


async def run_sync(func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
    """Run a blocking service call in a worker thread."""

    return await asyncio.to_thread(func, *args, **kwargs)


def client_origin(request: Request) -> str:
    """Describe the caller for the service logs."""

    if request.client is None:
        return "unknown"
    return request.client.host


__all__ = ["client_origin", "run_sync"]
