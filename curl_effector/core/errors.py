class EffectorError(Exception):
    """
    Base exception for all curl effector failures.

    Every subclass is recovered into a failed CurlResult at the public API;
    none of them escape `CurlEffector.get` / `CurlEffector.post`.
    """

    kind = "EffectorError"


class ValidationError(EffectorError):
    """
    Raised before any process is spawned or any file is touched.
    """

    kind = "ValidationError"


class InvalidUrl(ValidationError):
    """
    Raised for malformed URLs and schemes outside the allow-list.
    """

    kind = "InvalidUrl"


class InvalidHeader(ValidationError):
    """
    Raised when a header could be misread by curl (bad name, CR/LF in value).
    """

    kind = "InvalidHeader"


class PathEscapesSandbox(ValidationError):
    """
    Raised when a path specification would leave the caller's vault.
    """

    kind = "PathEscapesSandbox"


class NonUtf8Output(EffectorError):
    """
    Raised when curl's stdout or stderr is not valid UTF-8.
    """

    kind = "NonUtf8Output"


class ProcessFailure(EffectorError):
    """
    Raised when curl ran but reported failure.
    """

    kind = "ProcessFailure"
