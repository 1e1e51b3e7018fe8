"""Interaction layer: presenter ports, rendezvous, timeout, and the terminal UI."""

from pinbridge.interaction.presentation import PresentationLoop
from pinbridge.interaction.protocols import (
    BiometricGate,
    ConfirmRequest,
    CredentialCache,
    InputRequest,
    MessageRequest,
    Presenter,
)
from pinbridge.interaction.rendezvous import Rendezvous
from pinbridge.interaction.timeout import TimeoutController

__all__ = [
    "BiometricGate",
    "ConfirmRequest",
    "CredentialCache",
    "InputRequest",
    "MessageRequest",
    "PresentationLoop",
    "Presenter",
    "Rendezvous",
    "TimeoutController",
]
