"""Decides when a cached credential may be returned without prompting."""

from __future__ import annotations

from pinbridge.assuan.state import SessionState
from pinbridge.interaction.protocols import BiometricGate, CredentialCache
from pinbridge.logging import get_logger

log = get_logger("gate")

DEFAULT_CACHE_LABEL = "GnuPG"


class CredentialGate:
    """Cache lookup plus biometric check for the GETPIN silent path.

    Collaborator failures never reach the caller: any exception or refusal
    simply means "prompt the user".
    """

    def __init__(
        self,
        cache: CredentialCache | None = None,
        biometrics: BiometricGate | None = None,
        default_label: str = DEFAULT_CACHE_LABEL,
    ) -> None:
        self._cache = cache
        self._biometrics = biometrics
        self._default_label = default_label

    @staticmethod
    def silent_path_allowed(state: SessionState) -> bool:
        """Whether the session permits trying the cache at all.

        A repeat prompt means a new passphrase is being chosen and an error
        text means the cached one was just rejected; neither may be
        answered from the cache.
        """
        return (
            state.repeat_prompt is None
            and state.error_text is None
            and state.allow_external_cache
        )

    def try_silent(self, state: SessionState) -> str | None:
        """Return the cached credential if the user may skip the prompt."""
        if self._cache is None or not self.silent_path_allowed(state):
            return None

        try:
            cached = self._cache.lookup(state.key_info)
        except Exception as e:
            log.warning("Cache lookup failed for %s: %s", state.key_info, e)
            return None
        if cached is None:
            log.debug("No cached credential for %s", state.key_info)
            return None

        if self._biometrics is None:
            return None
        try:
            success, error = self._biometrics.authenticate(state.window_title)
        except Exception as e:
            log.warning("Biometric check failed: %s", e)
            return None
        if not success:
            log.info("Biometric check declined%s", f": {error}" if error else "")
            return None

        log.info("Returning cached credential for %s", state.key_info)
        return cached

    def save(self, state: SessionState, credential: str, save_requested: bool) -> bool:
        """Store a freshly entered credential if the user and session allow it.

        Returns:
            True if the cache accepted the credential.
        """
        if not (save_requested and state.allow_external_cache) or self._cache is None:
            return False
        label = state.generated_label or self._default_label
        try:
            self._cache.store(state.key_info, credential, label)
        except Exception as e:
            log.warning("Could not cache credential for %s: %s", state.key_info, e)
            return False
        log.info("Cached credential for %s as %r", state.key_info, label)
        return True
