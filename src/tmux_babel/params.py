"""Header arguments handed over by the host document engine.

tmux_babel.params
~~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import logging
import os
import typing as t
import warnings
from collections.abc import Mapping

from tmux_babel import exc
from tmux_babel.config import TmuxBabelConfig

if t.TYPE_CHECKING:
    from typing_extensions import Self

logger = logging.getLogger(__name__)

Variables = tuple[tuple[str, str], ...]


def normalize_key(key: str) -> str:
    """Return header argument name without its leading colon.

    >>> normalize_key(':session')
    'session'
    >>> normalize_key('socket')
    'socket'
    """
    return key[1:] if key.startswith(":") else key


def parse_variables(value: t.Any) -> Variables:
    """Return ``(name, value)`` pairs from a ``:var`` header argument.

    Accepts a mapping, a ``name=value`` string, or a sequence of either
    ``name=value`` strings or pairs.

    Examples
    --------
    >>> parse_variables({'x': 1, 'y': 'two'})
    (('x', '1'), ('y', 'two'))

    >>> parse_variables('x=1')
    (('x', '1'),)

    >>> parse_variables(['x=1', ('y', 2)])
    (('x', '1'), ('y', '2'))

    >>> parse_variables(None)
    ()
    """
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return tuple((str(k), _stringify(v)) for k, v in value.items())
    if isinstance(value, str):
        return (_split_assignment(value),)

    pairs: list[tuple[str, str]] = []
    for item in value:
        if isinstance(item, str):
            pairs.append(_split_assignment(item))
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            pairs.append((str(item[0]), _stringify(item[1])))
        else:
            raise exc.BadHeaderArgument("var", item)
    return tuple(pairs)


def _split_assignment(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise exc.BadHeaderArgument("var", text)
    return name, value


def _stringify(value: t.Any) -> str:
    return "" if value is None else str(value)


def expand_body(body: str, variables: Variables = ()) -> str:
    """Return body with one shell assignment per variable in front.

    >>> print(expand_body('echo $x', (('x', '1'),)))
    x="1"
    echo $x

    >>> expand_body('ls')
    'ls'
    """
    if not variables:
        return body
    assignments = [f'{name}="{value}"' for name, value in variables]
    return "\n".join([*assignments, body])


@dataclasses.dataclass(frozen=True)
class HeaderArgs:
    """Header arguments of one code block, defaults filled in.

    Examples
    --------
    >>> args = HeaderArgs.from_params({':session': 'foo:bar', ':var': {'x': 1}})
    >>> args.session
    'foo:bar'
    >>> args.results
    'silent'
    >>> args.variables
    (('x', '1'),)
    """

    session: str
    terminal: str
    socket: str | None = None
    results: str = "silent"
    variables: Variables = ()

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, t.Any] | None = None,
        config: TmuxBabelConfig | None = None,
    ) -> Self:
        """Return header arguments merged over the config defaults.

        Parameters
        ----------
        params : mapping, optional
            Header arguments as the host engine passes them. Keys may carry a
            leading colon.
        config : :class:`~tmux_babel.config.TmuxBabelConfig`, optional
        """
        if config is None:
            config = TmuxBabelConfig()

        given = {normalize_key(k): v for k, v in (params or {}).items()}
        merged = {**config.default_header_args, **given}

        terminal = merged.get("terminal") or config.terminal
        if "terminal" in given and given["terminal"] != config.terminal:
            warnings.warn(
                "Setting :terminal per code block is deprecated,"
                " configure the terminal once instead",
                category=DeprecationWarning,
                stacklevel=2,
            )

        socket = merged.get("socket")
        if socket:
            socket = os.path.abspath(os.path.expanduser(os.fspath(socket)))
        else:
            socket = None

        raw_vars = given.get("var", given.get("vars"))

        return cls(
            session=str(merged.get("session") or ""),
            terminal=str(terminal),
            socket=socket,
            results=str(merged.get("results") or "silent"),
            variables=parse_variables(raw_vars),
        )
