"""pinbridge: pinentry-style helper agent with cached, biometric-gated credentials."""

__version__ = "0.1.0"

# Public API
from pinbridge.assuan import (
    AssuanServer,
    CommandDispatcher,
    CredentialGate,
    ErrorCode,
    InfoProvider,
    SessionState,
    TerminalInfo,
)
from pinbridge.config import Config, get_config, load_config
from pinbridge.interaction import (
    BiometricGate,
    ConfirmRequest,
    CredentialCache,
    InputRequest,
    MessageRequest,
    PresentationLoop,
    Presenter,
)

__all__ = [
    "__version__",
    # Protocol core
    "AssuanServer",
    "CommandDispatcher",
    "CredentialGate",
    "ErrorCode",
    "InfoProvider",
    "SessionState",
    "TerminalInfo",
    # Config
    "Config",
    "load_config",
    "get_config",
    # Ports
    "BiometricGate",
    "CredentialCache",
    "Presenter",
    "PresentationLoop",
    "InputRequest",
    "ConfirmRequest",
    "MessageRequest",
]
