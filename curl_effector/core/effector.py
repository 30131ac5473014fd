from __future__ import annotations

import logging
from typing import List, Optional

from .arguments import build_get_args, build_post_args
from .errors import EffectorError, ValidationError
from .runner import CommandRunner, SubprocessCurlRunner
from .translate import decode_outcome
from .types import CurlRequest, CurlResult
from .url_check import validate_headers, validate_url
from .vault import SandboxContext, resolve_vault_path

log = logging.getLogger("curl_effector.core")


class CurlEffector:
    """
    Issue GET/POST requests through curl on behalf of an untrusted caller.

    Responsibilities
    - Validate the URL scheme and headers before anything else happens
    - Confine the data/output paths to the caller's vault
    - Build a deterministic curl argument list with the hardening flags
    - Turn curl's raw outcome into a CurlResult

    Security invariants
    - Validation failures return before the runner is called, so no process
      is spawned and no file is created.
    - Never raises EffectorError to the caller; every failure is a CurlResult.
    - Holds no per-call state; one instance may serve concurrent calls.
    """

    def __init__(self, runner: Optional[CommandRunner] = None):
        self._runner: CommandRunner = runner if runner is not None else SubprocessCurlRunner()

    def get(
        self, request: CurlRequest, output_vault_path: str, context: SandboxContext
    ) -> CurlResult:
        """GET `request.url` into `output_vault_path` inside the caller's vault."""

        try:
            url = validate_url(request.url)
            headers = validate_headers(request.headers)
            output_path = resolve_vault_path(output_vault_path, context)
            args = build_get_args(url, headers, output_path)
            return CurlResult.ok(self._run(args))
        except EffectorError as e:
            return self._reject("GET", e)

    def post(
        self,
        request: CurlRequest,
        data_vault_path: str,
        output_vault_path: str,
        context: SandboxContext,
    ) -> CurlResult:
        """POST the vault file `data_vault_path` and save the response to `output_vault_path`."""

        try:
            url = validate_url(request.url)
            headers = validate_headers(request.headers)
            data_path = resolve_vault_path(data_vault_path, context)
            output_path = resolve_vault_path(output_vault_path, context)
            args = build_post_args(url, headers, data_path, output_path)
            return CurlResult.ok(self._run(args))
        except EffectorError as e:
            return self._reject("POST", e)

    def _run(self, args: List[str]) -> str:
        log.debug("curl arguments: %r", args)
        raw = self._runner.run(args)
        log.debug("curl result: %s", raw.stringify())
        return decode_outcome(raw, args)

    @staticmethod
    def _reject(method: str, e: EffectorError) -> CurlResult:
        if isinstance(e, ValidationError):
            log.info("curl %s rejected (%s): %s", method, e.kind, e)
        else:
            log.warning("curl %s failed (%s): %s", method, e.kind, e)
        return CurlResult.failure(str(e))


def curl_get(
    request: CurlRequest,
    output_vault_path: str,
    context: SandboxContext,
    *,
    runner: Optional[CommandRunner] = None,
) -> CurlResult:
    """One-off GET using a default (or given) runner."""

    return CurlEffector(runner).get(request, output_vault_path, context)


def curl_post(
    request: CurlRequest,
    data_vault_path: str,
    output_vault_path: str,
    context: SandboxContext,
    *,
    runner: Optional[CommandRunner] = None,
) -> CurlResult:
    """One-off POST using a default (or given) runner."""

    return CurlEffector(runner).post(request, data_vault_path, output_vault_path, context)
