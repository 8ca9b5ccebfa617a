"""Retrying wrapper for idempotent CLI reads (gh api, ocm get)."""

from __future__ import annotations

from pathlib import Path
from time import sleep

from relbook.core.result import Err, Ok, Result
from relbook.platform.process import ProcessError
from relbook.platform.process import run as run_process
from relbook.release.errors import ReleaseError, ReleaseErrorKind
from relbook.release.timeouts import READ_RETRY_ATTEMPTS, READ_RETRY_DELAY_SECONDS

_TRANSIENT_MARKERS = (
    "timed out",
    "timeout",
    "connection reset",
    "connection refused",
    "temporarily unavailable",
    "service unavailable",
    "bad gateway",
    "gateway timeout",
    "tls handshake timeout",
    "network is unreachable",
    "no such host",
    "http 429",
    "http 500",
    "http 502",
    "http 503",
    "http 504",
)

_NOT_FOUND_MARKERS = (
    "http 404",
    "not found",
)


def is_transient(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _TRANSIENT_MARKERS)


def is_not_found(error: ProcessError) -> bool:
    # -1: the command never ran to completion (missing binary, timeout).
    if error.returncode == -1:
        return False
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


def run_read(
    *,
    cwd: Path,
    cmd: list[str],
    timeout: float,
    retry_attempts: int = READ_RETRY_ATTEMPTS,
) -> Result[str, ProcessError]:
    """Run a read-only command, retrying transient failures with linear backoff."""
    attempts = max(1, retry_attempts)
    last: ProcessError | None = None
    for attempt in range(attempts):
        result = run_process(cmd, cwd=cwd, timeout=timeout)
        if isinstance(result, Ok):
            return result

        last = result.error
        if attempt < attempts - 1 and is_transient(last):
            sleep(READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue
        break

    assert last is not None
    return Err(last)


def to_release_error(
    error: ProcessError, *, kind: ReleaseErrorKind, message: str, hint: str | None = None
) -> ReleaseError:
    return ReleaseError(kind=kind, message=message, hint=error.stderr.strip() or hint)
