"""Entry point for running pinbridge as a pinentry program.

Usage:
    python -m pinbridge

    # For testing with a file:
    printf 'GETINFO pid\\nBYE\\n' | python -m pinbridge

Configure gpg-agent.conf:
    pinentry-program /path/to/pinbridge
"""

import sys

from pinbridge.cli import main

if __name__ == "__main__":
    sys.exit(main())
