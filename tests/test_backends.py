"""Tests for the cache and biometric backends."""

from __future__ import annotations

import subprocess
from typing import Any

import pytest

from pinbridge.backends import (
    BackendError,
    DisabledBiometricGate,
    FprintdBiometricGate,
    MemoryCredentialCache,
    NullCredentialCache,
    SecretToolCredentialCache,
    build_biometric_gate,
    build_cache,
)
from pinbridge.config.schema import BiometricsConfig, CacheConfig
from pinbridge.interaction.protocols import BiometricGate, CredentialCache


class FakeRun:
    """Records subprocess.run calls and returns a canned result."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "",
                 raises: Exception | None = None) -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append((args, kwargs))
        if self.raises is not None:
            raise self.raises
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    run = FakeRun()
    monkeypatch.setattr(subprocess, "run", run)
    return run


class TestFactories:
    @pytest.mark.parametrize(
        ("backend", "expected"),
        [
            ("none", NullCredentialCache),
            ("", NullCredentialCache),
            ("memory", MemoryCredentialCache),
            ("secret-tool", SecretToolCredentialCache),
            ("keyring", SecretToolCredentialCache),
        ],
    )
    def test_build_cache(self, backend: str, expected: type) -> None:
        cache = build_cache(CacheConfig(backend=backend))
        assert isinstance(cache, expected)
        assert isinstance(cache, CredentialCache)

    def test_build_cache_passes_settings(self) -> None:
        cache = build_cache(CacheConfig(backend="secret-tool", service="work", command="/opt/st"))
        assert isinstance(cache, SecretToolCredentialCache)
        assert cache.service == "work"
        assert cache.command == "/opt/st"

    def test_unknown_cache(self) -> None:
        with pytest.raises(BackendError, match="Unknown cache backend"):
            build_cache(CacheConfig(backend="vault"))

    def test_build_biometrics(self) -> None:
        gate = build_biometric_gate(BiometricsConfig(backend="fprintd", command=["fp"], timeout=5))
        assert isinstance(gate, FprintdBiometricGate)
        assert isinstance(gate, BiometricGate)
        assert gate.command == ["fp"]
        assert isinstance(build_biometric_gate(BiometricsConfig()), DisabledBiometricGate)

    def test_unknown_biometrics(self) -> None:
        with pytest.raises(BackendError, match="Unknown biometrics backend"):
            build_biometric_gate(BiometricsConfig(backend="retina"))


class TestMemoryCache:
    def test_store_and_lookup(self) -> None:
        cache = MemoryCredentialCache()
        assert cache.lookup("GRIP") is None
        cache.store("GRIP", "pw", "Alice")
        assert cache.lookup("GRIP") == "pw"

    def test_null_cache(self) -> None:
        cache = NullCredentialCache()
        cache.store("GRIP", "pw", "Alice")
        assert cache.lookup("GRIP") is None


class TestSecretToolCache:
    """Tests for the secret-tool keyring backend."""

    def test_lookup(self, fake_run: FakeRun) -> None:
        fake_run.stdout = "hunter2"
        assert SecretToolCredentialCache().lookup("GRIP") == "hunter2"
        args, _ = fake_run.calls[0]
        assert args == ["secret-tool", "lookup", "service", "GnuPG", "account", "GRIP"]

    def test_lookup_miss(self, fake_run: FakeRun) -> None:
        fake_run.returncode = 1
        assert SecretToolCredentialCache().lookup("GRIP") is None

    def test_lookup_blank_key(self, fake_run: FakeRun) -> None:
        assert SecretToolCredentialCache().lookup("  ") is None
        assert fake_run.calls == []

    def test_lookup_missing_command(self, fake_run: FakeRun) -> None:
        fake_run.raises = FileNotFoundError("secret-tool")
        with pytest.raises(BackendError):
            SecretToolCredentialCache().lookup("GRIP")

    def test_store(self, fake_run: FakeRun) -> None:
        SecretToolCredentialCache(service="work").store("GRIP", "pw", "Alice (ABCDEF01)")
        args, kwargs = fake_run.calls[0]
        assert args == [
            "secret-tool", "store", "--label=Alice (ABCDEF01)",
            "service", "work", "account", "GRIP",
        ]
        assert kwargs["input"] == "pw"

    def test_store_failure(self, fake_run: FakeRun) -> None:
        fake_run.returncode = 1
        fake_run.stderr = "locked\n"
        with pytest.raises(BackendError, match="locked"):
            SecretToolCredentialCache().store("GRIP", "pw", "label")

    def test_store_timeout(self, fake_run: FakeRun) -> None:
        fake_run.raises = subprocess.TimeoutExpired(["secret-tool"], 1)
        with pytest.raises(BackendError):
            SecretToolCredentialCache().store("GRIP", "pw", "label")


class TestFprintd:
    """Tests for the fingerprint gate."""

    def test_disabled(self) -> None:
        success, error = DisabledBiometricGate().authenticate("reason")
        assert success is False
        assert error

    def test_match(self, fake_run: FakeRun) -> None:
        assert FprintdBiometricGate().authenticate("Unlock") == (True, None)
        args, kwargs = fake_run.calls[0]
        assert args == ["fprintd-verify"]
        assert kwargs["timeout"] == 30.0

    def test_no_match(self, fake_run: FakeRun) -> None:
        fake_run.returncode = 1
        fake_run.stdout = "Verify started!\nVerify result: verify-no-match (done)\n"
        assert FprintdBiometricGate().authenticate("x") == (
            False, "Verify result: verify-no-match (done)"
        )

    def test_no_output(self, fake_run: FakeRun) -> None:
        fake_run.returncode = 2
        assert FprintdBiometricGate().authenticate("x") == (False, "exit code 2")

    def test_not_installed(self, fake_run: FakeRun) -> None:
        fake_run.raises = FileNotFoundError()
        assert FprintdBiometricGate(["fp-check"]).authenticate("x") == (
            False, "fp-check not installed"
        )

    def test_timeout(self, fake_run: FakeRun) -> None:
        fake_run.raises = subprocess.TimeoutExpired(["fprintd-verify"], 1)
        success, error = FprintdBiometricGate().authenticate("x")
        assert success is False
        assert error is not None and "timed out" in error
