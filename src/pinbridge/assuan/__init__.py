"""Assuan protocol core: command dispatch, session state, and response encoding."""

from pinbridge.assuan.dispatcher import CommandDispatcher
from pinbridge.assuan.encoding import (
    ErrorCode,
    credential_response,
    data_response,
    encode_credential,
    error_response,
    escape_line,
    percent_decode,
    percent_encode,
)
from pinbridge.assuan.gate import CredentialGate
from pinbridge.assuan.info import InfoProvider, TerminalInfo
from pinbridge.assuan.labels import extract_key_id, extract_label, extract_name
from pinbridge.assuan.server import AssuanServer, protocol_input
from pinbridge.assuan.state import SessionState

__all__ = [
    "AssuanServer",
    "CommandDispatcher",
    "CredentialGate",
    "ErrorCode",
    "InfoProvider",
    "SessionState",
    "TerminalInfo",
    "credential_response",
    "data_response",
    "encode_credential",
    "error_response",
    "escape_line",
    "extract_key_id",
    "extract_label",
    "extract_name",
    "percent_decode",
    "percent_encode",
    "protocol_input",
]
