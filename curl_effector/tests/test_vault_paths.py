import os

import pytest

from curl_effector.core.errors import PathEscapesSandbox
from curl_effector.core.vault import SandboxContext, resolve_vault_path

VAULT = "/srv/vaults/test_id-token"
VIRTUAL = "/tmp/vault/test_id-token"


@pytest.fixture
def ctx():
    return SandboxContext(vault_dir=VAULT, aliases=(VIRTUAL,))


def test_bare_filename_lands_in_vault(ctx):
    assert resolve_vault_path("output.json", ctx) == os.path.join(VAULT, "output.json")


def test_relative_subpath_and_dot_segments(ctx):
    assert resolve_vault_path("./sub//out.json", ctx) == os.path.join(VAULT, "sub", "out.json")


def test_qualified_real_and_virtual_paths_map_to_vault(ctx):
    assert resolve_vault_path(f"{VAULT}/input2.json", ctx) == os.path.join(VAULT, "input2.json")
    assert resolve_vault_path(f"{VIRTUAL}/output2.json", ctx) == os.path.join(
        VAULT, "output2.json"
    )


@pytest.mark.parametrize(
    "spec",
    [
        "../secrets.json",
        "a/../../b",
        "a/..",
        "..",
        f"{VIRTUAL}/../other-token/x",
        f"{VAULT}/../../etc/passwd",
    ],
)
def test_upward_traversal_is_rejected_not_normalized(ctx, spec):
    with pytest.raises(PathEscapesSandbox, match="traverses"):
        resolve_vault_path(spec, ctx)


@pytest.mark.parametrize(
    "spec",
    [
        "/etc/passwd",
        "/tmp/vault/secrets.json",
        # prefix match must respect component boundaries
        "/tmp/vault/test_id-tokenX/a.json",
        "/srv/vaults/test_id-token-other/a.json",
    ],
)
def test_absolute_paths_outside_vault_are_rejected(ctx, spec):
    with pytest.raises(PathEscapesSandbox, match="outside the vault"):
        resolve_vault_path(spec, ctx)


@pytest.mark.parametrize("spec", ["", ".", "./", VAULT, VIRTUAL + "/", "a\x00b", "a\\..\\b"])
def test_degenerate_specs_are_rejected(ctx, spec):
    with pytest.raises(PathEscapesSandbox):
        resolve_vault_path(spec, ctx)


def test_resolution_never_touches_the_filesystem(tmp_path):
    missing = tmp_path / "does-not-exist"
    ctx = SandboxContext.for_dir(str(missing))
    assert resolve_vault_path("x.json", ctx) == os.path.join(str(missing), "x.json")
    assert not missing.exists()


def test_sandbox_context_rejects_bad_roots_fail_closed():
    with pytest.raises(ValueError):
        SandboxContext(vault_dir="")
    with pytest.raises(ValueError):
        SandboxContext(vault_dir="/")
    with pytest.raises(TypeError):
        SandboxContext(vault_dir=VAULT, aliases=VIRTUAL)  # type: ignore[arg-type]

    ctx = SandboxContext(vault_dir=VAULT + "/", aliases=[VIRTUAL + "//"])
    assert ctx.vault_dir == VAULT
    assert ctx.aliases == (VIRTUAL,)
    assert ctx.roots == (VAULT, VIRTUAL)


@pytest.mark.parametrize("spec", ["#1", "out#1.json", "sub/#2", f"{VIRTUAL}/#1", "a#b"])
def test_glob_substitution_markers_are_rejected(ctx, spec):
    with pytest.raises(PathEscapesSandbox, match="#"):
        resolve_vault_path(spec, ctx)
