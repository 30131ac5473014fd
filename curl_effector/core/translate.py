from __future__ import annotations

from typing import Sequence, Tuple

from .errors import EffectorError, NonUtf8Output, ProcessFailure
from .types import CurlResult, RawOutcome


def _decode_streams(raw: RawOutcome) -> Tuple[str, str]:
    try:
        return raw.stdout.decode("utf-8"), raw.stderr.decode("utf-8")
    except UnicodeDecodeError as e:
        raise NonUtf8Output("stdout or stderr contains non valid UTF8 string") from e


def _failure_text(raw: RawOutcome, stderr: str) -> str:
    text = stderr.strip()
    if text:
        return text
    if raw.error:
        return raw.error
    return f"exit status {raw.ret_code}"


def decode_outcome(raw: RawOutcome, args: Sequence[str]) -> str:
    """Return curl's trimmed stdout or raise.

    Raises
    - NonUtf8Output: either stream is not UTF-8; nothing partial is returned.
    - ProcessFailure: curl (or the runner) reported failure. The message
      carries the argument list so the failing call can be reproduced.
    """

    stdout, stderr = _decode_streams(raw)
    if raw.ret_code != 0 or raw.error:
        joined = " ".join(args)
        raise ProcessFailure(f"curl cli call failed \n{joined}: {_failure_text(raw, stderr)}")
    return stdout.strip()


def translate_outcome(raw: RawOutcome, args: Sequence[str]) -> CurlResult:
    """Like `decode_outcome`, but failures come back as data."""

    try:
        return CurlResult.ok(decode_outcome(raw, args))
    except EffectorError as e:
        return CurlResult.failure(str(e))
