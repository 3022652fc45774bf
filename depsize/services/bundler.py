"""Adapter that runs an external bundler on one unit and measures the output."""

from __future__ import annotations

import asyncio
import gzip
import logging
import shlex
from pathlib import Path
from typing import List, Optional, Protocol

from depsize.config import settings
from depsize.schemas.units import BundleOptions, Measurement, Unit
from depsize.utils.concurrency import ConcurrencyLimiter
from depsize.utils.file_io import exists, file_size, read_bytes, remove_file, write_bytes

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127
MISSING_OUTPUT = 1
IO_FAILURE = 1
CANNOT_EXECUTE = 126


class Bundler(Protocol):
    async def invoke(self, unit: Unit, options: BundleOptions) -> Measurement:
        ...


class SubprocessBundler:
    """Bundle units by spawning a command built from a template.

    Template fields: ``{input}``, ``{output}``, ``{output_dir}``,
    ``{output_name}``, ``{name}``, ``{target_only}`` and ``{config}``.
    """

    def __init__(
        self,
        process_limiter: ConcurrencyLimiter,
        fs_limiter: ConcurrencyLimiter,
        *,
        command: Optional[str] = None,
        config_command: Optional[str] = None,
        external_flag: Optional[str] = None,
    ):
        self._process_limiter = process_limiter
        self._fs_limiter = fs_limiter
        self._command = command or settings.bundler_command
        self._config_command = config_command or settings.bundler_config_command
        self._external_flag = external_flag or settings.bundler_external_flag

    def build_command(self, unit: Unit, options: BundleOptions) -> List[str]:
        output = Path(unit.output_path)
        fields = {
            "input": unit.input_path,
            "output": unit.output_path,
            "output_dir": str(output.parent),
            "output_name": output.name,
            "name": options.target_name,
            "target_only": "true" if options.target_only else "false",
            "config": options.config_path or "",
        }
        template = self._config_command if options.config_path else self._command
        argv = [token.format(**fields) for token in shlex.split(template)]
        if not options.config_path:
            # A custom config decides externals itself
            argv.extend(self._external_flag.format(name=name) for name in options.externals)
        return argv

    async def _spawn(self, argv: List[str], cwd: str, verbose: bool) -> int:
        stream = None if verbose else asyncio.subprocess.DEVNULL
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=stream,
                stderr=stream,
            )
        except FileNotFoundError:
            logger.error("Bundler executable not found: %s", argv[0])
            return COMMAND_NOT_FOUND
        except OSError as exc:
            logger.error("Could not start bundler %s: %s", argv[0], exc)
            return CANNOT_EXECUTE
        return await process.wait()

    async def _gzip_size(self, unit: Unit) -> int:
        if not await exists(self._fs_limiter, unit.gzip_path):
            contents = await read_bytes(self._fs_limiter, unit.output_path)
            await write_bytes(self._fs_limiter, unit.gzip_path, gzip.compress(contents, 9))
        return await file_size(self._fs_limiter, unit.gzip_path)

    async def invoke(self, unit: Unit, options: BundleOptions) -> Measurement:
        argv = self.build_command(unit, options)
        logger.debug("Bundling %s: %s", unit.name, shlex.join(argv))

        try:
            # Stale artifacts from a previous run must not be measured
            for stale in (unit.output_path, unit.gzip_path):
                await remove_file(self._fs_limiter, stale)
        except OSError as exc:
            logger.error("Could not clear previous output for %s: %s", unit.name, exc)
            return Measurement(unit=unit, exit_code=IO_FAILURE)

        code = await self._process_limiter.run(self._spawn, argv, options.cwd, options.verbose)
        if code != 0:
            return Measurement(unit=unit, exit_code=code)

        try:
            raw_bytes = await file_size(self._fs_limiter, unit.output_path)
            gzip_bytes = await self._gzip_size(unit)
        except FileNotFoundError:
            logger.error("Bundler exited cleanly but wrote no output for %s", unit.name)
            return Measurement(unit=unit, exit_code=MISSING_OUTPUT)
        except OSError as exc:
            logger.error("Could not measure output for %s: %s", unit.name, exc)
            return Measurement(unit=unit, exit_code=IO_FAILURE)
        return Measurement(unit=unit, exit_code=0, raw_bytes=raw_bytes, gzip_bytes=gzip_bytes)
