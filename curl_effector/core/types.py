from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True, slots=True)
class HttpHeader:
    """A single request header.

    No casing normalization is applied; order and duplicates are the caller's
    business.
    """

    name: str
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError("header name must be a string")
        if not isinstance(self.value, str):
            raise TypeError("header value must be a string")

    @classmethod
    def parse(cls, raw: str) -> "HttpHeader":
        """Parse a `Name: value` line as typed on a command line."""

        name, sep, value = raw.partition(":")
        if not sep:
            raise ValueError(f"header must look like 'Name: value': {raw!r}")
        return cls(name=name.strip(), value=value.strip())

    def render(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass(frozen=True, slots=True)
class CurlRequest:
    """An outbound request: target URL plus ordered headers.

    Security notes:
    - Everything in here is untrusted caller input. Validation happens in the
      effector, not here; this only enforces types.
    """

    url: str
    headers: Tuple[HttpHeader, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.url, str):
            raise TypeError("url must be a string")

        headers = self.headers
        if not isinstance(headers, tuple):
            try:
                headers = tuple(headers)
            except TypeError as e:
                raise TypeError("headers must be an iterable of HttpHeader") from e

        for h in headers:
            if not isinstance(h, HttpHeader):
                raise TypeError("headers must contain only HttpHeader instances")

        object.__setattr__(self, "headers", headers)

    @classmethod
    def with_header_pairs(cls, url: str, pairs: Iterable[Tuple[str, str]]) -> "CurlRequest":
        return cls(url=url, headers=tuple(HttpHeader(n, v) for n, v in pairs))


@dataclass(frozen=True, slots=True)
class CurlResult:
    """Outcome of a single effector call.

    Exactly one of `payload` / `error` is meaningful, selected by `success`.
    """

    success: bool
    payload: str = ""
    error: str = ""

    @classmethod
    def ok(cls, payload: str) -> "CurlResult":
        return cls(success=True, payload=payload, error="")

    @classmethod
    def failure(cls, error: str) -> "CurlResult":
        return cls(success=False, payload="", error=error)


@dataclass(frozen=True, slots=True)
class RawOutcome:
    """What a command runner captured from one curl invocation.

    `error` is set by the runner itself when curl could not be run to
    completion (spawn failure, process timeout).
    """

    ret_code: int
    stdout: bytes = b""
    stderr: bytes = b""
    error: str = ""

    def stringify(self) -> str:
        """Lossy, log-friendly rendering. Never use this for results."""

        out = self.stdout.decode("utf-8", errors="replace")
        err = self.stderr.decode("utf-8", errors="replace")
        return f"ret_code={self.ret_code} error={self.error!r} stdout={out!r} stderr={err!r}"
