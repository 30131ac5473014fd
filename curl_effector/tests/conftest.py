from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pytest

from curl_effector.core.types import RawOutcome
from curl_effector.core.vault import SandboxContext

PARTICLE_ID = "test_id"
TOKEN = "token"
VIRTUAL_VAULT = "/tmp/vault/test_id-token"


class ScriptedRunner:
    """Stands in for curl: records calls and returns a scripted outcome."""

    def __init__(
        self,
        outcome: Optional[RawOutcome] = None,
        on_run: Optional[Callable[[List[str]], RawOutcome]] = None,
    ):
        self.outcome = outcome if outcome is not None else RawOutcome(ret_code=0)
        self.on_run = on_run
        self.calls: List[List[str]] = []

    def run(self, args: Sequence[str]) -> RawOutcome:
        self.calls.append(list(args))
        if self.on_run is not None:
            return self.on_run(list(args))
        return self.outcome


def output_path_of(args: Sequence[str]) -> str:
    return args[list(args).index("-o") + 1]


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def fake_curl() -> Callable[[str], ScriptedRunner]:
    """Factory for a runner that behaves like a successful curl call.

    The response body is written to the `-o` file and also echoed on stdout.
    """

    def make(body: str) -> ScriptedRunner:
        def on_run(args: List[str]) -> RawOutcome:
            Path(output_path_of(args)).write_text(body, encoding="utf-8")
            return RawOutcome(ret_code=0, stdout=(body + "\n").encode("utf-8"))

        return ScriptedRunner(on_run=on_run)

    return make


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    d = tmp_path / "vault" / f"{PARTICLE_ID}-{TOKEN}"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def sandbox(vault: Path) -> SandboxContext:
    return SandboxContext.for_dir(str(vault), aliases=[VIRTUAL_VAULT])
