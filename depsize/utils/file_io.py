"""Async file helpers that run under a shared file-handle limiter."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

import aiofiles
import aiofiles.os

from depsize.utils.concurrency import ConcurrencyLimiter

PathLike = Union[str, Path]


async def _read_text(path: PathLike) -> str:
    async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as handle:
        return await handle.read()


async def _read_bytes(path: PathLike) -> bytes:
    async with aiofiles.open(path, "rb") as handle:
        return await handle.read()


async def _write_text(path: PathLike, contents: str) -> None:
    async with aiofiles.open(path, "w", encoding="utf-8") as handle:
        await handle.write(contents)


async def _write_bytes(path: PathLike, contents: bytes) -> None:
    async with aiofiles.open(path, "wb") as handle:
        await handle.write(contents)


async def read_text(limiter: ConcurrencyLimiter, path: PathLike) -> str:
    return await limiter.run(_read_text, path)


async def read_bytes(limiter: ConcurrencyLimiter, path: PathLike) -> bytes:
    return await limiter.run(_read_bytes, path)


async def write_text(limiter: ConcurrencyLimiter, path: PathLike, contents: str) -> None:
    await limiter.run(_write_text, path, contents)


async def write_bytes(limiter: ConcurrencyLimiter, path: PathLike, contents: bytes) -> None:
    await limiter.run(_write_bytes, path, contents)


async def file_size(limiter: ConcurrencyLimiter, path: PathLike) -> int:
    stat_result = await limiter.run(aiofiles.os.stat, path)
    return stat_result.st_size


async def exists(limiter: ConcurrencyLimiter, path: PathLike) -> bool:
    return await limiter.run(aiofiles.os.path.exists, path)


async def _remove(path: PathLike) -> None:
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        pass


async def remove_file(limiter: ConcurrencyLimiter, path: PathLike) -> None:
    """Delete ``path``; a missing file is not an error."""
    await limiter.run(_remove, path)


def ensure_dir(path: PathLike) -> Path:
    """Create ``path`` (and parents) if missing and return it."""
    directory = Path(path)
    os.makedirs(directory, exist_ok=True)
    return directory
