from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import PathEscapesSandbox


def _clean_root(root: str, what: str) -> str:
    if not isinstance(root, str):
        raise TypeError(f"{what} must be a string")
    cleaned = root.rstrip("/")
    if not cleaned:
        raise ValueError(f"{what} must be a non-empty path other than '/'")
    if "\x00" in cleaned:
        raise ValueError(f"{what} must not contain NUL")
    return cleaned


@dataclass(frozen=True, slots=True)
class SandboxContext:
    """
    Per-call sandbox supplied by the host.

    - vault_dir: real directory all resolved paths land in.
    - aliases: other spellings of the same directory callers may use for
      fully-qualified paths (e.g. the virtual `/tmp/vault/<particle>` path).

    Security invariants
    - Immutable; built by trusted host code, never from caller input.
    - Roots are stored without trailing slashes so prefix checks are
      component-aligned.
    """

    vault_dir: str
    aliases: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "vault_dir", _clean_root(self.vault_dir, "vault_dir"))

        aliases = self.aliases
        if isinstance(aliases, str):
            raise TypeError("aliases must be an iterable of strings, not a string")
        aliases = tuple(_clean_root(a, "alias") for a in aliases)
        object.__setattr__(self, "aliases", aliases)

    @classmethod
    def for_dir(cls, vault_dir: str, aliases: Iterable[str] = ()) -> "SandboxContext":
        return cls(vault_dir=str(vault_dir), aliases=tuple(str(a) for a in aliases))

    @property
    def roots(self) -> Tuple[str, ...]:
        return (self.vault_dir,) + self.aliases


def _strip_root(path_spec: str, root: str) -> Optional[str]:
    if path_spec == root:
        return ""
    prefix = root + "/"
    if path_spec.startswith(prefix):
        return path_spec[len(prefix):]
    return None


def resolve_vault_path(path_spec: str, context: SandboxContext) -> str:
    """Map a caller path onto a path inside `context.vault_dir`.

    Accepted forms
    - `name.json` or `sub/name.json`: relative to the vault
    - `<vault_dir>/name.json` or `<alias>/name.json`: already qualified

    The check is done on the string's components only. `..` is rejected rather
    than normalized, and symlinks are never consulted, so the answer does not
    depend on what is on disk.

    Raises
    - PathEscapesSandbox: on any spec that could point outside the vault.
    """

    if not isinstance(path_spec, str) or not path_spec:
        raise PathEscapesSandbox("path must be a non-empty string")
    if "\x00" in path_spec:
        raise PathEscapesSandbox("path must not contain NUL")
    if "\\" in path_spec:
        raise PathEscapesSandbox(f"path must not contain backslashes: {path_spec!r}")
    # curl expands `#<n>` in the -o path with URL glob matches
    if "#" in path_spec:
        raise PathEscapesSandbox(f"path must not contain '#': {path_spec!r}")

    rel: Optional[str] = None
    for root in context.roots:
        rel = _strip_root(path_spec, root)
        if rel is not None:
            break

    if rel is None:
        if path_spec.startswith("/"):
            raise PathEscapesSandbox(f"absolute path is outside the vault: {path_spec!r}")
        rel = path_spec

    parts: List[str] = []
    for comp in rel.split("/"):
        if comp in ("", "."):
            continue
        if comp == "..":
            raise PathEscapesSandbox(f"path traverses out of the vault: {path_spec!r}")
        parts.append(comp)

    if not parts:
        raise PathEscapesSandbox(f"path names the vault directory itself: {path_spec!r}")

    return os.path.join(context.vault_dir, *parts)
