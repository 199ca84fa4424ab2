"""Command line entry point: perform one exchange and report the response."""

import argparse
import asyncio
import sys
from typing import List, Optional

from eofclient.config.settings import ClientConfig
from eofclient.errors import SessionError
from eofclient.session import AsyncClientSession, ClientSession


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    defaults = ClientConfig()
    parser = argparse.ArgumentParser(
        prog="eofclient",
        description="Send one <EOF>-terminated command and print the response",
    )
    parser.add_argument("--host", default=defaults.host, help="Server host")
    parser.add_argument("--port", type=int, default=defaults.port, help="Server port")
    parser.add_argument(
        "--command", default=defaults.command, help="Command text to send"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Seconds to wait on each phase (default: wait forever)",
    )
    parser.add_argument(
        "--buffer-size",
        type=_positive_int,
        default=defaults.buffer_size,
        help="Bytes requested per read",
    )
    parser.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Drive the session from an asyncio task",
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Print only the response text"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = ClientConfig(
        host=args.host,
        port=args.port,
        command=args.command,
        buffer_size=args.buffer_size,
        timeout=args.timeout,
    )
    verbose = not args.quiet

    try:
        if args.use_async:
            response = asyncio.run(
                AsyncClientSession(config=config, verbose=verbose).run()
            )
        else:
            response = ClientSession(config=config, verbose=verbose).run()
    except (SessionError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not verbose:
        print(response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
