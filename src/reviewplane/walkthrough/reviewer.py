"""External reviewer adapter.

The reviewer is any CLI that takes a prompt and prints a response. ``codex``
gets the prompt as its last argument; anything else is invoked as
``<command> run --model <model>`` with the prompt on stdin.
"""

from __future__ import annotations

import asyncio
import contextlib
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from reviewplane.config.models import ReviewerConfig
from reviewplane.core.errors import ReviewerError
from reviewplane.core.logging import get_logger

log = get_logger("walkthrough.reviewer")


class Reviewer(Protocol):
    """Prompt in, raw text out. Failures raise ReviewerError."""

    async def review(self, prompt: str) -> str: ...


@dataclass(frozen=True, slots=True)
class ReviewerCommand:
    """Concrete invocation for one prompt."""

    command: str
    args: tuple[str, ...]
    stdin: str | None = None


def build_reviewer_command(config: ReviewerConfig, prompt: str) -> ReviewerCommand:
    if config.command == "codex":
        args = ["exec", "--model", config.model]
        if config.reasoning_effort:
            args += ["--config", f'model_reasoning_effort="{config.reasoning_effort}"']
        args.append(prompt)
        return ReviewerCommand(command=config.command, args=tuple(args))
    return ReviewerCommand(
        command=config.command,
        args=("run", "--model", config.model),
        stdin=prompt,
    )


class CommandReviewer:
    """Runs the configured reviewer CLI as a subprocess."""

    def __init__(self, config: ReviewerConfig, *, cwd: Path | None = None) -> None:
        self._config = config
        self._cwd = cwd

    async def review(self, prompt: str) -> str:
        spec = build_reviewer_command(self._config, prompt)
        if shutil.which(spec.command) is None:
            raise ReviewerError.unavailable(spec.command, "executable not found on PATH")

        start_time = time.time()
        try:
            proc = await asyncio.create_subprocess_exec(
                spec.command,
                *spec.args,
                stdin=(
                    asyncio.subprocess.PIPE
                    if spec.stdin is not None
                    else asyncio.subprocess.DEVNULL
                ),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._cwd,
            )
        except OSError as e:
            raise ReviewerError.unavailable(spec.command, str(e)) from e

        stdin_bytes = spec.stdin.encode() if spec.stdin is not None else None
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(stdin_bytes), timeout=self._config.timeout_sec
            )
        except TimeoutError as e:
            raise ReviewerError.timeout(spec.command, self._config.timeout_sec) from e
        finally:
            # Timed out or cancelled mid-call
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()

        stdout = stdout_bytes.decode(errors="replace")
        stderr = stderr_bytes.decode(errors="replace")
        duration = time.time() - start_time
        if proc.returncode != 0:
            log.warning(
                "reviewer_failed",
                command=spec.command,
                returncode=proc.returncode,
                duration_seconds=round(duration, 2),
            )
            raise ReviewerError.command_failed(spec.command, proc.returncode or -1, stderr)

        log.info(
            "reviewer_finished",
            command=spec.command,
            model=self._config.model,
            output_chars=len(stdout),
            duration_seconds=round(duration, 2),
        )
        return stdout
