from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from starlette.requests import Request

from curl_effector.api.auth import (
    CAP_GET,
    CAP_POST,
    Actor,
    anonymous_actor,
    authenticate,
    load_auth_config,
    requires_auth,
)
from curl_effector.api.middleware import RequestLogMiddleware
from curl_effector.api.models import CurlGetIn, CurlPostIn, CurlResultOut
from curl_effector.core.effector import CurlEffector
from curl_effector.core.runner import CommandRunner
from curl_effector.core.vault import SandboxContext
from curl_effector.host.particle import (
    CallParameters,
    HostConfig,
    build_runner,
    sandbox_context_for,
)

log = logging.getLogger("curl_effector.api")


def create_app(
    *, runner: Optional[CommandRunner] = None, config: Optional[HostConfig] = None
) -> FastAPI:
    """Create the FastAPI app.

    `runner` replaces the subprocess runner (tests pass a scripted fake);
    `config` replaces the environment-derived HostConfig.
    """

    cfg = config if config is not None else HostConfig.from_env()
    effector = CurlEffector(runner if runner is not None else build_runner(cfg))
    mapping = load_auth_config()
    must_auth = requires_auth(mapping)
    anonymous = anonymous_actor()

    level = os.environ.get("CURL_EFFECTOR_LOG_LEVEL", "INFO").strip().upper()
    try:
        log.setLevel(level)
    except ValueError:
        log.setLevel(logging.INFO)
        log.warning("unknown CURL_EFFECTOR_LOG_LEVEL %r, using INFO", level)

    app = FastAPI(title="curl effector", version="0.1")
    app.state.cfg = cfg
    app.state.effector = effector
    app.state.must_auth = must_auth

    app.add_middleware(RequestLogMiddleware)

    def get_actor(
        request: Request,
        x_curl_effector_api_key: Optional[str] = Header(default=None),
    ) -> Actor:
        """Authenticate request; fail closed (401) when auth is on."""

        if not must_auth:
            actor = anonymous
        else:
            actor = authenticate(x_curl_effector_api_key, mapping)
            if actor is None:
                raise HTTPException(status_code=401, detail="unauthorized")

        request.state.actor_id = actor.actor_id
        return actor

    def get_sandbox(
        request: Request,
        x_particle_id: Optional[str] = Header(default=None),
        x_particle_token: Optional[str] = Header(default=None),
    ) -> SandboxContext:
        """Derive the caller's vault from the particle headers (400 if unusable)."""

        if not x_particle_id or not x_particle_token:
            raise HTTPException(status_code=400, detail="missing_particle")
        try:
            cp = CallParameters(particle_id=x_particle_id, token=x_particle_token)
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail="invalid_particle")

        request.state.particle_id = cp.particle_id
        return sandbox_context_for(cp, cfg)

    def _require_cap(actor: Actor, cap: str) -> None:
        if not actor.may(cap):
            raise HTTPException(status_code=403, detail="forbidden")

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True, "auth_required": must_auth}

    @app.post("/curl/get", response_model=CurlResultOut)
    def curl_get_endpoint(
        body: CurlGetIn,
        actor: Actor = Depends(get_actor),
        sandbox: SandboxContext = Depends(get_sandbox),
    ) -> CurlResultOut:
        """GET a URL into the particle's vault.

        Requires capability: curl:get
        """

        _require_cap(actor, CAP_GET)
        request = body.request.to_request()
        result = effector.get(request, body.output_vault_path, sandbox)
        return CurlResultOut.from_result(result)

    @app.post("/curl/post", response_model=CurlResultOut)
    def curl_post_endpoint(
        body: CurlPostIn,
        actor: Actor = Depends(get_actor),
        sandbox: SandboxContext = Depends(get_sandbox),
    ) -> CurlResultOut:
        """POST a vault file and store the response in the vault.

        Requires capability: curl:post
        """

        _require_cap(actor, CAP_POST)
        request = body.request.to_request()
        result = effector.post(request, body.data_vault_path, body.output_vault_path, sandbox)
        return CurlResultOut.from_result(result)

    return app
