"""Hosting-side glue: turns per-call identity into a sandbox and a runner."""

from .particle import CallParameters, HostConfig, build_runner, sandbox_context_for

__all__ = ["CallParameters", "HostConfig", "build_runner", "sandbox_context_for"]
