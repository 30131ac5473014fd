from .arguments import CONNECT_TIMEOUT, RETRY_COUNT, build_get_args, build_post_args
from .effector import CurlEffector, curl_get, curl_post
from .errors import (
    EffectorError,
    InvalidHeader,
    InvalidUrl,
    NonUtf8Output,
    PathEscapesSandbox,
    ProcessFailure,
    ValidationError,
)
from .runner import CommandRunner, SubprocessCurlRunner
from .translate import translate_outcome
from .types import CurlRequest, CurlResult, HttpHeader, RawOutcome
from .url_check import validate_headers, validate_url
from .vault import SandboxContext, resolve_vault_path

__all__ = [
    "CONNECT_TIMEOUT",
    "RETRY_COUNT",
    "build_get_args",
    "build_post_args",
    "CurlEffector",
    "curl_get",
    "curl_post",
    "EffectorError",
    "ValidationError",
    "InvalidUrl",
    "InvalidHeader",
    "PathEscapesSandbox",
    "NonUtf8Output",
    "ProcessFailure",
    "CommandRunner",
    "SubprocessCurlRunner",
    "translate_outcome",
    "CurlRequest",
    "CurlResult",
    "HttpHeader",
    "RawOutcome",
    "validate_url",
    "validate_headers",
    "SandboxContext",
    "resolve_vault_path",
]
