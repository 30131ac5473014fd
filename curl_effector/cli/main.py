from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import List

from curl_effector.core.effector import CurlEffector
from curl_effector.core.types import CurlRequest, CurlResult, HttpHeader
from curl_effector.core.vault import SandboxContext
from curl_effector.host.particle import (
    CallParameters,
    HostConfig,
    build_runner,
    sandbox_context_for,
)


class UsageError(Exception):
    """Bad command-line input detected after argparse (exit code 2)."""


def _print_json(obj: object) -> None:
    print(json.dumps(obj, indent=2, sort_keys=True))


def _configure_logging(level: str) -> None:
    if not isinstance(logging.getLevelName(level.upper()), int):
        raise UsageError(f"unknown log level: {level!r}")
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _sandbox_from_args(args: argparse.Namespace, cfg: HostConfig) -> SandboxContext:
    """Pick the vault: an explicit --vault wins over --particle-id/--token."""

    if args.vault:
        try:
            return SandboxContext.for_dir(args.vault, aliases=args.vault_alias or ())
        except (TypeError, ValueError) as e:
            raise UsageError(str(e)) from e
    if not (args.particle_id and args.token):
        raise UsageError("either --vault or both --particle-id and --token are required")
    try:
        cp = CallParameters(particle_id=args.particle_id, token=args.token)
    except ValueError as e:
        raise UsageError(str(e)) from e
    return sandbox_context_for(cp, cfg)


def _request_from_args(args: argparse.Namespace) -> CurlRequest:
    try:
        headers = tuple(HttpHeader.parse(h) for h in (args.header or []))
    except ValueError as e:
        raise UsageError(str(e)) from e
    return CurlRequest(url=args.url, headers=headers)


def _report(result: CurlResult) -> int:
    _print_json(asdict(result))
    return 0 if result.success else 1


def cmd_get(args: argparse.Namespace) -> int:
    """GET a URL into a vault file."""

    cfg = HostConfig.from_env()
    sandbox = _sandbox_from_args(args, cfg)
    effector = CurlEffector(build_runner(cfg))
    return _report(effector.get(_request_from_args(args), args.output, sandbox))


def cmd_post(args: argparse.Namespace) -> int:
    """POST a vault file and save the response into the vault."""

    cfg = HostConfig.from_env()
    sandbox = _sandbox_from_args(args, cfg)
    effector = CurlEffector(build_runner(cfg))
    return _report(effector.post(_request_from_args(args), args.data, args.output, sandbox))


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server.

    Security notes:
    - Binds to 127.0.0.1 by default.
    - Set CURL_EFFECTOR_API_KEYS to require X-Curl-Effector-API-Key.
    - Without keys, curl calls are refused unless CURL_EFFECTOR_ALLOW_ANONYMOUS=1.
    """

    try:
        import uvicorn
    except ImportError as e:
        print(f"error: uvicorn is required to serve the API: {e}", file=sys.stderr)
        return 2

    from curl_effector.api.server import create_app

    uvicorn.run(create_app(), host=args.host, port=int(args.port), log_level=args.log_level)
    return 0


def _add_request_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("url", help="http:// or https:// URL")
    p.add_argument(
        "-H",
        "--header",
        action="append",
        default=None,
        help="Request header 'Name: value' (repeatable, order kept)",
    )
    p.add_argument("-o", "--output", required=True, help="Output path inside the vault")
    p.add_argument("--vault", default=None, help="Vault directory to confine paths to")
    p.add_argument(
        "--vault-alias",
        action="append",
        default=None,
        help="Extra prefix that also names the vault (repeatable)",
    )
    p.add_argument("--particle-id", default=None, help="Particle id (vault from host config)")
    p.add_argument("--token", default=None, help="Particle token (vault from host config)")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    p = argparse.ArgumentParser(prog="curl-effector", description="Sandboxed curl GET/POST")
    p.add_argument("--log-level", default="warning", help="Logging level (default: warning)")
    sub = p.add_subparsers(dest="cmd", required=True)

    gp = sub.add_parser("get", help="GET a URL into the vault")
    _add_request_args(gp)
    gp.set_defaults(func=cmd_get)

    pp = sub.add_parser("post", help="POST a vault file to a URL")
    _add_request_args(pp)
    pp.add_argument("--data", required=True, help="Request body file inside the vault")
    pp.set_defaults(func=cmd_post)

    sv = sub.add_parser("serve", help="Run the curl effector FastAPI server")
    sv.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    sv.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    sv.set_defaults(func=cmd_serve)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        _configure_logging(args.log_level)
        return int(args.func(args))
    except UsageError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
