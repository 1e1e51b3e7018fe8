"""Line-based Assuan server over a pair of text streams.

Handles newline-delimited commands on the input stream and writes each
response line to the output stream, flushing after every response so the
agent on the other end never waits on a buffer.
"""

from __future__ import annotations

import io
import sys
from typing import BinaryIO, TextIO

from pinbridge.assuan.dispatcher import CommandDispatcher
from pinbridge.logging import get_logger

log = get_logger("server")

DEFAULT_GREETING = "Pleased to meet you"


def protocol_input(binary: BinaryIO | None = None) -> TextIO:
    """Wrap a byte stream (stdin by default) for reading command lines.

    Agents may pass descriptions in a legacy 8-bit charset; bytes that are
    not valid UTF-8 are replaced instead of ending the session.
    """
    if binary is None:
        binary = sys.stdin.buffer
    return io.TextIOWrapper(binary, encoding="utf-8", errors="replace")


class AssuanServer:
    """Runs the greeting + command loop for one connection."""

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
        greeting: str = DEFAULT_GREETING,
    ) -> None:
        self.dispatcher = dispatcher
        self.input = input_stream if input_stream is not None else protocol_input()
        self.output = output_stream if output_stream is not None else sys.stdout
        self.greeting = greeting
        self.commands_handled = 0

    def _send(self, text: str) -> None:
        for line in text.split("\n"):
            self.output.write(line + "\n")
        self.output.flush()

    def serve(self) -> None:
        """Serve until BYE or end of input."""
        try:
            self._send(f"OK {self.greeting}" if self.greeting else "OK")
            for line in self.input:
                response = self.dispatcher.handle(line)
                if response is None:
                    continue
                self.commands_handled += 1
                self._send(response)
                if _is_bye(line):
                    log.info("BYE received, closing connection")
                    return
            log.info("Input closed")
        except (BrokenPipeError, ConnectionResetError):
            log.info("Pipe closed, shutting down...")


def _is_bye(line: str) -> bool:
    return line.strip().partition(" ")[0].upper() == "BYE"
