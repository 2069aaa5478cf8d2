"""Command line interface for tmux-babel.

tmux_babel.cli
~~~~~~~~~~~~~~

.. code-block:: console

    $ echo 'python3' | tmux-babel send --session py:repl
    $ tmux-babel send --session work script.sh --var HOST=example.org
    $ tmux-babel selftest --terminal xterm
"""

from __future__ import annotations

import argparse
import logging
import sys
import typing as t

from tmux_babel import exc
from tmux_babel.__about__ import __version__
from tmux_babel._internal.engines import SubprocessExecutor
from tmux_babel.config import TmuxBabelConfig
from tmux_babel.manager import SessionManager
from tmux_babel.selftest import SELF_TEST_MARKER, SELF_TEST_SPECIFIER, run_self_test

if t.TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Return parser for the ``tmux-babel`` command."""
    parser = argparse.ArgumentParser(
        prog="tmux-babel",
        description="Send code blocks to a persistent tmux session.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log lifecycle steps, twice for every tmux command",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--socket", help="tmux control socket path")
    common.add_argument("--terminal", help="terminal emulator for new sessions")
    common.add_argument(
        "--timeout",
        type=float,
        help="seconds to wait for the window, 0 or less waits forever",
    )

    subparsers = parser.add_subparsers(dest="subparser_name", required=True)

    send = subparsers.add_parser(
        "send",
        parents=[common],
        help="type a code block into a tmux window",
    )
    send.add_argument(
        "-s",
        "--session",
        default="",
        help="session[:window] specifier",
    )
    send.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="shell variable assigned before the block, repeatable",
    )
    send.add_argument(
        "file",
        nargs="?",
        type=argparse.FileType("r"),
        default=sys.stdin,
        help="file holding the code block (default: stdin)",
    )

    selftest = subparsers.add_parser(
        "selftest",
        parents=[common],
        help="check that tmux and the terminal emulator work",
    )
    selftest.add_argument("-s", "--session", default=SELF_TEST_SPECIFIER)
    selftest.add_argument("--marker", default=SELF_TEST_MARKER)

    return parser


def setup_logging(verbosity: int) -> None:
    """Configure root logger for command line use."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_manager(args: argparse.Namespace) -> SessionManager:
    """Return manager configured from the environment and ``args``."""
    overrides: dict[str, t.Any] = {}
    if args.timeout is not None:
        overrides["poll_timeout"] = args.timeout if args.timeout > 0 else None
    if args.terminal:
        overrides["terminal"] = args.terminal
    config = TmuxBabelConfig.from_env(**overrides)
    executor = SubprocessExecutor(diagnostic_log=config.diagnostic_log)
    return SessionManager(config=config, executor=executor)


def command_send(args: argparse.Namespace, manager: SessionManager) -> int:
    """Dispatch a code block read from a file or stdin."""
    body = args.file.read()
    params: dict[str, t.Any] = {"session": args.session, "var": args.var}
    if args.socket:
        params["socket"] = args.socket
    manager.execute(body, params)
    return 0


def command_selftest(args: argparse.Namespace, manager: SessionManager) -> int:
    """Run the end-to-end self test."""
    ok = run_self_test(
        manager,
        args.session,
        marker=args.marker,
        socket_path=args.socket,
    )
    print("tmux-babel: setup seems to be working" if ok else "tmux-babel: failed")
    return 0 if ok else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``tmux-babel`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        manager = build_manager(args)
        if args.subparser_name == "send":
            return command_send(args, manager)
        return command_selftest(args, manager)
    except exc.TmuxBabelException as e:
        logger.debug("tmux-babel failed", exc_info=True)
        print(f"tmux-babel: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
