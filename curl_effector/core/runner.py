from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import Optional, Protocol, Sequence

from .types import RawOutcome

log = logging.getLogger("curl_effector.core")

# Returned by the runner when curl never produced an exit status of its own.
SPAWN_FAILED = -1
TIMED_OUT = -2


class CommandRunner(Protocol):
    """
    Executes curl with the given arguments and reports what happened.

    Implementations must not raise for process-level problems; those belong in
    RawOutcome.error.
    """

    def run(self, args: Sequence[str]) -> RawOutcome:
        ...


def find_curl(explicit: Optional[str] = None) -> str:
    """Locate the curl binary."""

    if explicit:
        return explicit
    path = shutil.which("curl")
    if path:
        return path
    for p in ("/usr/bin/curl", "/usr/local/bin/curl", "/bin/curl"):
        if os.path.exists(p):
            return p
    return "curl"


class SubprocessCurlRunner:
    """Run curl as a child process.

    Security notes:
    - Arguments are passed as a list with shell=False; nothing is interpolated
      into a shell command line.
    - stdin is closed so curl cannot block on (or read from) our stdin.
    - `timeout_seconds` bounds the whole process. None waits indefinitely;
      the connect timeout in the argument list still applies.
    """

    def __init__(self, curl_path: Optional[str] = None, timeout_seconds: Optional[float] = None):
        self.curl_path = find_curl(curl_path)
        self.timeout_seconds = timeout_seconds

    def run(self, args: Sequence[str]) -> RawOutcome:
        cmd = [self.curl_path, *args]
        try:
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout_seconds,
                check=False,
                shell=False,
            )
        except subprocess.TimeoutExpired as e:
            log.warning("curl timed out after %ss", self.timeout_seconds)
            return RawOutcome(
                ret_code=TIMED_OUT,
                stdout=e.stdout or b"",
                stderr=e.stderr or b"",
                error=f"curl timed out after {self.timeout_seconds}s",
            )
        except OSError as e:
            log.error("failed to spawn %s: %s", self.curl_path, e)
            return RawOutcome(ret_code=SPAWN_FAILED, error=f"failed to spawn curl: {e}")

        return RawOutcome(
            ret_code=int(proc.returncode),
            stdout=proc.stdout or b"",
            stderr=proc.stderr or b"",
        )
