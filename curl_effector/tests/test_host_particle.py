import os

import pytest

from curl_effector.host.particle import (
    CallParameters,
    HostConfig,
    build_runner,
    sandbox_context_for,
)


def test_call_parameters_name_the_particle_vault():
    cp = CallParameters(particle_id="test_id", token="token")
    assert cp.vault_name == "test_id-token"


@pytest.mark.parametrize(
    "particle_id,token",
    [("", "t"), ("p", ""), ("..", "t"), (".", "t"), ("a/b", "t"), ("p", "x\\y"), ("p", "a\x00")],
)
def test_call_parameters_reject_path_tricks(particle_id, token):
    with pytest.raises(ValueError):
        CallParameters(particle_id=particle_id, token=token)


def test_call_parameters_reject_non_strings():
    with pytest.raises(TypeError):
        CallParameters(particle_id=1, token="t")  # type: ignore[arg-type]


def test_sandbox_context_has_real_dir_and_virtual_alias(tmp_path):
    cfg = HostConfig(vault_dir=str(tmp_path), virtual_vault_dir="/tmp/vault")
    ctx = sandbox_context_for(CallParameters("test_id", "token"), cfg)
    assert ctx.vault_dir == os.path.join(str(tmp_path), "test_id-token")
    assert ctx.aliases == ("/tmp/vault/test_id-token",)


def test_sandbox_context_skips_alias_identical_to_real_dir():
    cfg = HostConfig(vault_dir="/tmp/vault", virtual_vault_dir="/tmp/vault")
    ctx = sandbox_context_for(CallParameters("p", "t"), cfg)
    assert ctx.vault_dir == "/tmp/vault/p-t"
    assert ctx.aliases == ()


def test_host_config_from_env(monkeypatch):
    monkeypatch.setenv("CURL_EFFECTOR_VAULT_DIR", "/srv/vaults")
    monkeypatch.setenv("CURL_EFFECTOR_VIRTUAL_VAULT_DIR", "/vault")
    monkeypatch.setenv("CURL_EFFECTOR_CURL_PATH", "/opt/bin/curl")
    monkeypatch.setenv("CURL_EFFECTOR_PROCESS_TIMEOUT_SEC", "30")

    cfg = HostConfig.from_env()
    assert cfg == HostConfig(
        vault_dir="/srv/vaults",
        virtual_vault_dir="/vault",
        curl_path="/opt/bin/curl",
        process_timeout_sec=30,
    )


def test_host_config_defaults_and_bad_values(monkeypatch):
    for var in (
        "CURL_EFFECTOR_VAULT_DIR",
        "CURL_EFFECTOR_VIRTUAL_VAULT_DIR",
        "CURL_EFFECTOR_CURL_PATH",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CURL_EFFECTOR_PROCESS_TIMEOUT_SEC", "soon")

    cfg = HostConfig.from_env()
    assert cfg.vault_dir == "/tmp/vault"
    assert cfg.virtual_vault_dir == "/tmp/vault"
    assert cfg.curl_path is None
    assert cfg.process_timeout_sec == 0


def test_build_runner_maps_timeout():
    assert build_runner(HostConfig(curl_path="/x/curl")).timeout_seconds is None
    r = build_runner(HostConfig(curl_path="/x/curl", process_timeout_sec=5))
    assert r.timeout_seconds == 5.0
    assert r.curl_path == "/x/curl"
