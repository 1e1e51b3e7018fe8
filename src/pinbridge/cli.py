"""Command-line interface for pinbridge.

gpg-agent starts the program configured as ``pinentry-program`` and talks
to it over stdin/stdout. The protocol loop runs on a worker thread while
the main thread runs the presentation loop that owns the terminal UI.
"""

from __future__ import annotations

import argparse
import os
import threading
from collections.abc import Sequence

from pinbridge import __version__
from pinbridge.assuan import AssuanServer, CommandDispatcher, CredentialGate, InfoProvider, TerminalInfo
from pinbridge.backends import BackendError, build_biometric_gate, build_cache
from pinbridge.config import Config, load_config
from pinbridge.interaction.presentation import PresentationLoop
from pinbridge.interaction.terminal import DEFAULT_DEVICE, TerminalPresenter
from pinbridge.logging import get_logger, setup_logging

log = get_logger()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pinbridge",
        description="Pinentry helper with cached, biometric-gated passphrases",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="Increase verbosity (can be repeated)",
    )
    parser.add_argument(
        "--config",
        help="Config file path (default: PINBRIDGE_CONFIG or the user config)",
    )
    parser.add_argument(
        "--log-file",
        help="Append log output to this file",
    )

    # Options gpg-agent passes to every pinentry
    agent = parser.add_argument_group("pinentry options")
    agent.add_argument("-T", "--ttyname", help="Terminal device to prompt on")
    agent.add_argument("-N", "--ttytype", help="Terminal type")
    agent.add_argument("-D", "--display", help="X display")
    agent.add_argument("-C", "--lc-ctype", help="Locale for character classes")
    agent.add_argument("-M", "--lc-messages", help="Locale for messages")
    agent.add_argument("-o", "--timeout", type=int, help="Accepted for compatibility")
    agent.add_argument("-g", "--no-global-grab", action="store_true")
    agent.add_argument("-W", "--parent-wid", help="Accepted for compatibility")
    agent.add_argument("-d", "--debug", action="store_true", help="Same as -vvv")
    return parser


def _apply_cli_overrides(config: Config, args: argparse.Namespace) -> None:
    if args.debug:
        config.logging.verbose = 3
    if args.verbose is not None:
        config.logging.verbose = min(args.verbose + 2, 4)
    if args.log_file:
        config.logging.file = args.log_file


def build_dispatcher(config: Config, args: argparse.Namespace, loop: PresentationLoop) -> CommandDispatcher:
    """Wire collaborators from configuration."""
    terminal = TerminalInfo.from_environment(
        tty_name=args.ttyname, tty_type=args.ttytype, display=args.display
    )
    device = config.terminal.device or terminal.tty_name or DEFAULT_DEVICE

    try:
        cache = build_cache(config.cache)
        biometrics = build_biometric_gate(config.biometrics)
    except BackendError as e:
        log.error("%s; external password cache disabled", e)
        cache, biometrics = None, None

    return CommandDispatcher(
        presenter=TerminalPresenter(loop, device=device),
        gate=CredentialGate(cache, biometrics, default_label=config.cache.default_label),
        info=InfoProvider(__version__, terminal=terminal, flavor=config.protocol.flavor),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run pinbridge on stdin/stdout."""
    parser = create_parser()
    args, unknown = parser.parse_known_args(argv)

    config = load_config(config_path=args.config)
    _apply_cli_overrides(config, args)
    setup_logging(config.logging)

    if unknown:
        log.debug("Ignoring unknown arguments: %s", " ".join(unknown))
    log.info("Starting pinbridge %s (pid %d, cache=%s, biometrics=%s)",
             __version__, os.getpid(), config.cache.backend, config.biometrics.backend)

    loop = PresentationLoop()
    dispatcher = build_dispatcher(config, args, loop)
    server = AssuanServer(dispatcher, greeting=config.protocol.greeting)

    def serve() -> None:
        try:
            server.serve()
        finally:
            loop.stop()

    protocol_thread = threading.Thread(target=serve, name="assuan", daemon=True)
    protocol_thread.start()

    try:
        loop.run()
    except KeyboardInterrupt:
        log.info("Interrupted")
    log.info("Exiting after %d commands", server.commands_handled)
    return 0
