from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass
from typing import Optional

from curl_effector.core.runner import SubprocessCurlRunner
from curl_effector.core.vault import SandboxContext

DEFAULT_VAULT_DIR = "/tmp/vault"
DEFAULT_VIRTUAL_VAULT_DIR = "/tmp/vault"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable.

    Security notes:
    - Env vars are treated as trusted host configuration.
    """

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


def _check_component(value: str, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string")
    if not value or value in (".", ".."):
        raise ValueError(f"{what} must be a non-empty name")
    if any(ch in value for ch in ("/", "\\", "\x00")):
        raise ValueError(f"{what} must not contain path separators or NUL")
    return value


@dataclass(frozen=True, slots=True)
class CallParameters:
    """Per-call identity handed over by the hosting runtime.

    The pair names the particle's private vault: `<vault_dir>/<id>-<token>`.

    Security invariants
    - Both parts are single path components, so the derived vault directory
      is always a direct child of the configured vault root.
    """

    particle_id: str
    token: str

    def __post_init__(self) -> None:
        _check_component(self.particle_id, "particle_id")
        _check_component(self.token, "token")

    @property
    def vault_name(self) -> str:
        return f"{self.particle_id}-{self.token}"


@dataclass(frozen=True, slots=True)
class HostConfig:
    """Host-side settings. None of these reach the core as mutable state."""

    vault_dir: str = DEFAULT_VAULT_DIR
    virtual_vault_dir: str = DEFAULT_VIRTUAL_VAULT_DIR
    curl_path: Optional[str] = None
    process_timeout_sec: int = 0

    @classmethod
    def from_env(cls) -> "HostConfig":
        """
        - CURL_EFFECTOR_VAULT_DIR (default /tmp/vault)
        - CURL_EFFECTOR_VIRTUAL_VAULT_DIR (default /tmp/vault)
        - CURL_EFFECTOR_CURL_PATH (default: curl on PATH)
        - CURL_EFFECTOR_PROCESS_TIMEOUT_SEC (default 0, no limit)
        """

        return cls(
            vault_dir=os.environ.get("CURL_EFFECTOR_VAULT_DIR", "").strip() or DEFAULT_VAULT_DIR,
            virtual_vault_dir=(
                os.environ.get("CURL_EFFECTOR_VIRTUAL_VAULT_DIR", "").strip()
                or DEFAULT_VIRTUAL_VAULT_DIR
            ),
            curl_path=os.environ.get("CURL_EFFECTOR_CURL_PATH", "").strip() or None,
            process_timeout_sec=max(0, _env_int("CURL_EFFECTOR_PROCESS_TIMEOUT_SEC", 0)),
        )


def sandbox_context_for(cp: CallParameters, cfg: HostConfig) -> SandboxContext:
    """Build the sandbox for one call.

    The real directory lives under `cfg.vault_dir`; the particle may also
    spell paths with the virtual prefix it sees (`/tmp/vault/<id>-<token>`).
    """

    real = os.path.join(cfg.vault_dir, cp.vault_name)
    virtual = posixpath.join(cfg.virtual_vault_dir, cp.vault_name)
    aliases = () if virtual == real else (virtual,)
    return SandboxContext(vault_dir=real, aliases=aliases)


def build_runner(cfg: HostConfig) -> SubprocessCurlRunner:
    timeout = float(cfg.process_timeout_sec) if cfg.process_timeout_sec > 0 else None
    return SubprocessCurlRunner(curl_path=cfg.curl_path, timeout_seconds=timeout)
