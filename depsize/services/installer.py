"""Install declared dependencies into the measurement cache directory."""

import asyncio
import logging
from pathlib import Path
from typing import List, Union

from depsize.exceptions import InstallError
from depsize.utils.concurrency import ConcurrencyLimiter

logger = logging.getLogger(__name__)


def install_command(use_yarn: bool) -> List[str]:
    return ["yarn", "install"] if use_yarn else ["npm", "install"]


async def _run_install(argv: List[str], cwd: str, verbose: bool) -> int:
    stream = None if verbose else asyncio.subprocess.DEVNULL
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=stream,
            stderr=stream,
        )
    except FileNotFoundError as exc:
        raise InstallError(f"Package manager not found: {argv[0]}") from exc
    return await process.wait()


async def install_dependencies(
    cache_dir: Union[str, Path],
    use_yarn: bool,
    verbose: bool,
    limiter: ConcurrencyLimiter,
) -> None:
    """Run ``yarn install`` or ``npm install`` inside ``cache_dir``.

    Raises:
        InstallError: If the package manager is missing or exits non-zero
    """
    argv = install_command(use_yarn)
    logger.info("Installing dependencies with %s", argv[0])
    code = await limiter.run(_run_install, argv, str(cache_dir), verbose)
    if code != 0:
        raise InstallError(f"'{' '.join(argv)}' exited with code {code} in {cache_dir}")
    logger.debug("Install finished in %s", cache_dir)
