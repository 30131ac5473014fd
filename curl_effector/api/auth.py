from __future__ import annotations

import hmac
import os
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

CAP_GET = "curl:get"
CAP_POST = "curl:post"
ALL_CAPS: FrozenSet[str] = frozenset({CAP_GET, CAP_POST})


@dataclass(frozen=True, slots=True)
class Actor:
    """Authenticated caller of the service.

    Security notes:
    - Capabilities come from the server-side key mapping, never from the
      request.
    """

    actor_id: str
    capabilities: FrozenSet[str]

    def may(self, capability: str) -> bool:
        return capability in self.capabilities


ANONYMOUS = Actor(actor_id="anonymous", capabilities=frozenset())

_TRUTHY = {"1", "true", "yes"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def anonymous_actor() -> Actor:
    """Actor used when auth is off.

    It holds no capabilities unless CURL_EFFECTOR_ALLOW_ANONYMOUS is truthy,
    so an unconfigured service refuses every curl call.
    """

    if _env_flag("CURL_EFFECTOR_ALLOW_ANONYMOUS"):
        return Actor(actor_id=ANONYMOUS.actor_id, capabilities=ALL_CAPS)
    return ANONYMOUS


def parse_api_keys(raw: str) -> Dict[str, Actor]:
    """Parse CURL_EFFECTOR_API_KEYS into an API key -> Actor mapping.

    Format (semicolon-separated entries):
      <APIKEY>:<ACTOR_ID>[:<cap1,cap2>]

    An entry without a capability list gets both `curl:get` and `curl:post`.
    Unknown capabilities are dropped; malformed entries are ignored.

    Example:
      CURL_EFFECTOR_API_KEYS="k1:worker-a;k2:worker-b:curl:get"
    """

    out: Dict[str, Actor] = {}
    for entry in (raw or "").split(";"):
        entry = entry.strip()
        if not entry:
            continue
        parts = entry.split(":", 2)
        if len(parts) < 2:
            continue
        key, actor_id = parts[0].strip(), parts[1].strip()
        if not key or not actor_id:
            continue
        if len(parts) == 3:
            caps = frozenset(c.strip() for c in parts[2].split(",") if c.strip()) & ALL_CAPS
        else:
            caps = ALL_CAPS
        out[key] = Actor(actor_id=actor_id, capabilities=caps)
    return out


def load_auth_config() -> Dict[str, Actor]:
    return parse_api_keys(os.environ.get("CURL_EFFECTOR_API_KEYS", ""))


def requires_auth(mapping: Dict[str, Actor]) -> bool:
    """Auth is required if CURL_EFFECTOR_REQUIRE_AUTH is truthy or any key is configured."""

    if _env_flag("CURL_EFFECTOR_REQUIRE_AUTH"):
        return True
    return bool(mapping)


def authenticate(api_key: Optional[str], mapping: Dict[str, Actor]) -> Optional[Actor]:
    """Return the Actor for `api_key`, or None.

    Every configured key is compared with hmac.compare_digest, matched or not.
    """

    if not api_key:
        return None

    found: Optional[Actor] = None
    for k, actor in mapping.items():
        if hmac.compare_digest(k.encode("utf-8"), api_key.encode("utf-8")):
            found = actor
    return found
