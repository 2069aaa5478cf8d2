"""Helpers for testing code that drives tmux-babel.

:class:`RecordingExecutor` stands in for
:class:`~tmux_babel._internal.engines.SubprocessExecutor` and remembers every
command. :class:`FakeTmux` plugs into it and keeps just enough tmux state
(sessions, windows, typed lines) for a block run to go through.
"""

from __future__ import annotations

import collections
import dataclasses
import logging
import os
import typing as t

from tmux_babel._internal.engines.base import CommandResult

if t.TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    Responder = Callable[[list[str], bool], "CommandResult | None"]

logger = logging.getLogger(__name__)

#: tmux options taking a value, as far as tmux-babel uses them
_VALUE_FLAGS = {"-t", "-c", "-s", "-n", "-F", "-S", "-L", "-f"}


@dataclasses.dataclass
class Call:
    """A command seen by :class:`RecordingExecutor`."""

    argv: list[str]
    captured: bool


@dataclasses.dataclass
class FakeProcess:
    """Finished process returned for fire-and-forget commands."""

    argv: list[str]
    returncode: int = 0

    def poll(self) -> int | None:
        """Return exit status."""
        return self.returncode

    def wait(self, timeout: float | None = None) -> int:
        """Return exit status."""
        return self.returncode


def strip_server_args(argv: Sequence[str]) -> list[str]:
    """Return tmux command line without program and global flags.

    >>> strip_server_args(['tmux', '-S/tmp/s', 'send-keys', '-t', 'x', 'Enter'])
    ['send-keys', '-t', 'x', 'Enter']

    >>> strip_server_args(['tmux', '-L', 'sock', 'list-sessions'])
    ['list-sessions']
    """
    args = list(argv[1:])
    while args and args[0].startswith("-"):
        flag = args.pop(0)
        if flag in _VALUE_FLAGS and args:
            args.pop(0)
    return args


def parse_tmux_args(args: Sequence[str]) -> tuple[dict[str, str | bool], list[str]]:
    """Split a tmux subcommand's arguments into flags and positionals.

    >>> parse_tmux_args(['-t', 's:^', '-l', '--', '-x'])
    ({'-t': 's:^', '-l': True}, ['-x'])
    """
    flags: dict[str, str | bool] = {}
    positional: list[str] = []
    it = iter(args)
    for arg in it:
        if positional or not arg.startswith("-"):
            positional.append(arg)
        elif arg == "--":
            positional.extend(it)
        elif arg in _VALUE_FLAGS:
            flags[arg] = next(it, "")
        else:
            flags[arg] = True
    return flags, positional


def split_separator(args: Sequence[str]) -> list[str]:
    r"""Return arguments up to the first tmux command separator.

    Like tmux, an argument ending in ``;`` ends the command and a trailing
    ``\;`` stands for a literal ``;``.

    >>> split_separator(['SELECT 1;', 'next'])
    ['SELECT 1']
    >>> split_separator(['SELECT 1\\;'])
    ['SELECT 1;']
    >>> split_separator(['{} \\\\;'])
    ['{} \\;']
    """
    out: list[str] = []
    for arg in args:
        if not arg.endswith(";"):
            out.append(arg)
            continue
        arg = arg[:-1]
        if arg.endswith("\\"):
            out.append(arg[:-1] + ";")
            continue
        if arg:
            out.append(arg)
        break
    return out


class RecordingExecutor:
    """Executor that records commands instead of running them.

    Parameters
    ----------
    responder : callable, optional
        Called as ``responder(argv, captured)`` for every command. May return
        a :class:`~tmux_babel._internal.engines.CommandResult`, used as the
        answer to :meth:`capture`.

    Examples
    --------
    >>> executor = RecordingExecutor()
    >>> executor.execute('tmux', 'send-keys', 'Enter').returncode
    0
    >>> executor.capture('tmux', 'list-sessions').stdout
    []
    >>> executor.commands()
    [['send-keys', 'Enter'], ['list-sessions']]
    """

    def __init__(self, responder: Responder | None = None) -> None:
        self.responder = responder
        self.calls: list[Call] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(calls={len(self.calls)})"

    def _respond(self, argv: list[str], captured: bool) -> CommandResult:
        self.calls.append(Call(argv=argv, captured=captured))
        result = None
        if self.responder is not None:
            result = self.responder(argv, captured)
        if result is None:
            result = CommandResult(argv=argv)
        return result

    def execute(self, *args: str) -> FakeProcess:
        """Record fire-and-forget command."""
        argv = [str(a) for a in args]
        result = self._respond(argv, captured=False)
        return FakeProcess(argv=argv, returncode=result.returncode)

    def capture(self, *args: str, check: bool = False) -> CommandResult:
        """Record command and return the responder's answer."""
        result = self._respond([str(a) for a in args], captured=True)
        if check:
            result.check()
        return result

    @property
    def executed(self) -> list[list[str]]:
        """Return argv of fire-and-forget commands, oldest first."""
        return [c.argv for c in self.calls if not c.captured]

    @property
    def captured(self) -> list[list[str]]:
        """Return argv of captured commands, oldest first."""
        return [c.argv for c in self.calls if c.captured]

    def commands(
        self,
        name: str | None = None,
        *,
        captured: bool | None = None,
        program: str = "tmux",
    ) -> list[list[str]]:
        """Return tmux subcommands issued, without program and global flags.

        Parameters
        ----------
        name : str, optional
            Only return this subcommand, e.g. ``"send-keys"``.
        captured : bool, optional
            Only return captured (``True``) or spawned (``False``) commands.
        program : str
            Basename of the tmux executable.
        """
        out = []
        for call in self.calls:
            if os.path.basename(call.argv[0]) != program:
                continue
            if captured is not None and call.captured != captured:
                continue
            args = strip_server_args(call.argv)
            if name is None or (args and args[0] == name):
                out.append(args)
        return out


class FakeTmux:
    """Minimal in-memory tmux for :class:`RecordingExecutor`.

    Commands take effect immediately unless ``delay`` is set. Commands for
    other programs (terminal emulators) are collected in :attr:`spawned`.

    Parameters
    ----------
    sessions : mapping, optional
        Session name to list of window names already running.
    tmux_bin : str
        Program name to treat as tmux.
    on_line : callable, optional
        Called with ``(target, line)`` whenever a line is completed with
        Enter.
    delay : int
        Number of later tmux calls a spawned ``new-session`` or
        ``new-window`` needs before it takes effect, like a tmux client
        still starting up in the background.

    Examples
    --------
    >>> tmux = FakeTmux(delay=2)
    >>> tmux(['tmux', 'new-session', '-d', '-s', 's', '-n', 'w'], False).ok
    True
    >>> tmux(['tmux', 'list-panes', '-t', 's:^', '-F', 'good'], True).ok
    False
    >>> tmux(['tmux', 'list-panes', '-t', 's:^', '-F', 'good'], True).stdout
    ['good']
    """

    #: commands whose effect is deferred when spawned
    deferred_commands = ("new-session", "new-window")

    def __init__(
        self,
        sessions: Mapping[str, Sequence[str]] | None = None,
        tmux_bin: str = "tmux",
        on_line: Callable[[str, str], None] | None = None,
        delay: int = 0,
    ) -> None:
        self.sessions: dict[str, list[str]] = {
            k: list(v) for k, v in (sessions or {}).items()
        }
        self.tmux_bin = tmux_bin
        self.on_line = on_line
        self.delay = delay
        self.options: dict[str, dict[str, str]] = collections.defaultdict(dict)
        self.typed: dict[str, list[str]] = collections.defaultdict(list)
        self.spawned: list[list[str]] = []
        self._pending: dict[str, str] = {}
        self._queued: list[list[t.Any]] = []

    def __call__(self, argv: list[str], captured: bool) -> CommandResult:
        if os.path.basename(argv[0]) != os.path.basename(self.tmux_bin):
            self.spawned.append(argv)
            return CommandResult(argv=argv)

        self._tick()
        args = strip_server_args(argv)
        if not args:
            return self._error(argv, "no command")
        flags, positional = parse_tmux_args(args[1:])
        handler = getattr(self, "_" + args[0].replace("-", "_"), None)
        if handler is None:
            return self._error(argv, f"unknown command: {args[0]}")
        if self.delay > 0 and not captured and args[0] in self.deferred_commands:
            self._queued.append([self.delay, handler, argv, flags, positional])
            return CommandResult(argv=argv)
        return handler(argv, flags, positional)

    def _tick(self) -> None:
        """Apply queued commands whose delay ran out, oldest first."""
        ready = []
        for entry in self._queued:
            entry[0] -= 1
            if entry[0] <= 0:
                ready.append(entry)
        for entry in ready:
            self._queued.remove(entry)
            _, handler, argv, flags, positional = entry
            result = handler(argv, flags, positional)
            if not result.ok:
                logger.debug(f"deferred {argv}: {result.stderr}")

    def _error(self, argv: list[str], message: str) -> CommandResult:
        return CommandResult(argv=argv, stderr=[message], returncode=1)

    def _find_window(self, target: str) -> str | None:
        session, _, window = target.partition(":")
        windows = self.sessions.get(session)
        if not windows:
            return None
        if window == "^":
            return windows[0]
        if window.startswith("="):
            window = window[1:]
        return window if window in windows else None

    def _list_sessions(self, argv, flags, positional) -> CommandResult:
        if not self.sessions:
            return self._error(argv, "no server running")
        return CommandResult(argv=argv, stdout=list(self.sessions))

    def _list_panes(self, argv, flags, positional) -> CommandResult:
        if self._find_window(str(flags.get("-t", ""))) is None:
            return self._error(argv, f"can't find window: {flags.get('-t')}")
        return CommandResult(argv=argv, stdout=[str(flags.get("-F", ""))])

    def _new_session(self, argv, flags, positional) -> CommandResult:
        name = str(flags.get("-s", ""))
        if name in self.sessions:
            return self._error(argv, f"duplicate session: {name}")
        self.sessions[name] = [str(flags.get("-n", "0"))]
        return CommandResult(argv=argv)

    def _new_window(self, argv, flags, positional) -> CommandResult:
        session = str(flags.get("-t", ""))
        if session not in self.sessions:
            return self._error(argv, f"can't find session: {session}")
        self.sessions[session].append(str(flags.get("-n", "")))
        return CommandResult(argv=argv)

    def _set_option(self, argv, flags, positional) -> CommandResult:
        target = str(flags.get("-t", ""))
        if self._find_window(target) is None:
            return self._error(argv, f"can't find window: {target}")
        option, value = positional
        self.options[target][option] = value
        return CommandResult(argv=argv)

    def _send_keys(self, argv, flags, positional) -> CommandResult:
        target = str(flags.get("-t", ""))
        if self._find_window(target) is None:
            return self._error(argv, f"can't find window: {target}")
        positional = split_separator(positional)
        if flags.get("-l"):
            self._pending[target] = self._pending.get(target, "") + "".join(positional)
            return CommandResult(argv=argv)
        for key in positional:
            if key == "Enter":
                line = self._pending.pop(target, "")
                self.typed[target].append(line)
                if self.on_line is not None:
                    self.on_line(target, line)
        return CommandResult(argv=argv)

    def _kill_server(self, argv, flags, positional) -> CommandResult:
        self.sessions.clear()
        return CommandResult(argv=argv)
