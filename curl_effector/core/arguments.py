from __future__ import annotations

from typing import Iterable, List, Sequence

from .types import HttpHeader

CONNECT_TIMEOUT = 4
RETRY_COUNT = 0

HEADER_SWITCH = "-H"


def hardening_flags() -> List[str]:
    """Flags appended to every curl invocation, in this order."""

    return [
        "--connect-timeout",
        str(CONNECT_TIMEOUT),
        "--no-progress-meter",
        "--retry",
        str(RETRY_COUNT),
    ]


def format_header_args(headers: Iterable[HttpHeader]) -> List[str]:
    out: List[str] = []
    for h in headers:
        out.append(HEADER_SWITCH)
        out.append(h.render())
    return out


def _harden(args: List[str]) -> List[str]:
    args.extend(hardening_flags())
    return args


# curl <url> -X GET
#      -H <headers[0]> -H <headers[1]> ...
#      -o <output_path>
#      --connect-timeout 4 --no-progress-meter --retry 0
def build_get_args(url: str, headers: Sequence[HttpHeader], output_path: str) -> List[str]:
    args = [url, "-X", "GET"]
    args.extend(format_header_args(headers))
    args.extend(["-o", output_path])
    return _harden(args)


# curl <url> -X POST
#      --data @<data_path>
#      -o <output_path>
#      -H <headers[0]> -H <headers[1]> ...
#      --connect-timeout 4 --no-progress-meter --retry 0
def build_post_args(
    url: str, headers: Sequence[HttpHeader], data_path: str, output_path: str
) -> List[str]:
    args = [url, "-X", "POST", "--data", f"@{data_path}", "-o", output_path]
    args.extend(format_header_args(headers))
    return _harden(args)
