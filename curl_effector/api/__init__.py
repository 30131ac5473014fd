"""curl effector API package.

Optional FastAPI service exposing `CurlEffector.get` / `CurlEffector.post`
to sandboxed callers identified by particle id and token.
"""

from .server import create_app  # noqa: F401
