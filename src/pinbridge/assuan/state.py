"""Per-process session state built up by SET* and OPTION commands."""

from __future__ import annotations

from dataclasses import dataclass

from pinbridge.assuan.labels import extract_label

DEFAULT_DESCRIPTION = "Please enter your passphrase"
DEFAULT_PROMPT = "Passphrase:"
DEFAULT_TITLE = "GPG Pinentry"
DEFAULT_KEY_INFO = "default"
DEFAULT_OK = "OK"
DEFAULT_CANCEL = "Cancel"
DEFAULT_REPEAT_ERROR = "Passphrases do not match"
BAD_PASSPHRASE_TEXT = "Incorrect passphrase. Please try again."


@dataclass
class SessionState:
    """Configuration accumulated from prior commands.

    Owned by a single CommandDispatcher. Transient fields (error_text,
    not_ok_text, repeat_prompt, timeout_seconds) are reset only by the
    interaction flow that consumed them.
    """

    description: str = DEFAULT_DESCRIPTION
    prompt: str = DEFAULT_PROMPT
    key_info: str = DEFAULT_KEY_INFO  # Opaque cache key, never empty
    window_title: str = DEFAULT_TITLE

    error_text: str | None = None  # Set by SETERROR, cleared after GETPIN

    ok_text: str = DEFAULT_OK
    cancel_text: str = DEFAULT_CANCEL
    not_ok_text: str | None = None  # Alternate cancel label

    repeat_prompt: str | None = None  # Enables double-entry mode
    repeat_error: str = DEFAULT_REPEAT_ERROR

    timeout_seconds: int = 0  # 0 = no timeout

    allow_external_cache: bool = False  # Sticky once enabled
    generated_label: str | None = None  # Derived from description

    def set_description(self, description: str) -> None:
        """Store the description and recompute the cache label."""
        self.description = description
        self.generated_label = extract_label(description)

    def set_key_info(self, raw: str) -> None:
        """Store a key identifier taken from an undecoded SETKEYINFO argument.

        Only the first space-separated token is used, and a ``<tag>/``
        prefix such as ``n/`` or ``s/`` is stripped.
        """
        token = raw.strip().split(" ", 1)[0]
        if token == "--clear":
            token = ""
        if "/" in token:
            token = token.split("/", 1)[1]
        self.key_info = token or DEFAULT_KEY_INFO

    @property
    def effective_description(self) -> str:
        return self.error_text if self.error_text is not None else self.description

    @property
    def effective_cancel_label(self) -> str:
        return self.not_ok_text if self.not_ok_text is not None else self.cancel_text

    def reset_after_getpin(self) -> None:
        """Clear the fields a GETPIN interaction consumed."""
        self.error_text = None
        self.not_ok_text = None
        self.repeat_prompt = None
        self.timeout_seconds = 0

    def reset_after_confirm(self) -> None:
        """Clear the fields a CONFIRM interaction consumed."""
        self.not_ok_text = None
