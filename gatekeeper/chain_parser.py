"""Quote-aware command parser for the gatekeeper.

One deterministic state machine decides whether a command string is a single
command, a chain that can be evaluated part by part, or something too
ambiguous to split.

Only ``;`` and ``&&`` produce splits. Everything else that couples commands
(pipes, ``||``, background ``&``, redirects, substitutions) is unparseable.

>>> parse_chained_command("npm test && npm run build")
Chain(parts=('npm test', 'npm run build'))
>>> parse_chained_command("ls -la | grep test")
Unparseable()
>>> parse_chained_command("git commit -m 'a && b'")
Single()
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

# Subshell, backtick, newline and process substitution: rejected even inside quotes
_SUBSTITUTION_RE = re.compile(r"\$\(|`|\n|<\(|>\(")

# Characters that force a full scan (backslash included to catch a trailing escape)
_SPECIAL_CHARS_RE = re.compile(r"[;&|<>\\]")

_NORMAL = "normal"
_SINGLE = "single"
_DOUBLE = "double"


@dataclass(frozen=True)
class Unparseable:
    """Structure could not be safely decomposed."""

    kind = "unparseable"


@dataclass(frozen=True)
class Single:
    """No unquoted chain operator: the whole string is one command."""

    kind = "single"


@dataclass(frozen=True)
class Chain:
    """Split on ``;`` / ``&&`` into trimmed, non-empty parts."""

    parts: tuple[str, ...]
    kind = "chain"


ParseResult = Union[Unparseable, Single, Chain]


def parse_chained_command(cmd: str) -> ParseResult:
    """Classify a command as unparseable, single, or a chain of parts.

    Callers MUST trim the command first. Deny rules are anchored at the
    start of the string, so untrimmed input would slip past them.

    >>> parse_chained_command("ls; pwd")
    Chain(parts=('ls', 'pwd'))
    >>> parse_chained_command("ls ;; pwd")
    Unparseable()
    >>> parse_chained_command("echo hello\\\\")
    Unparseable()
    """
    if _SUBSTITUTION_RE.search(cmd):
        return Unparseable()

    if not _SPECIAL_CHARS_RE.search(cmd):
        return Single()

    state = _NORMAL
    escaped = False
    parts: list[str] = []
    current: list[str] = []
    has_chain_op = False

    i = 0
    length = len(cmd)
    while i < length:
        ch = cmd[i]
        i += 1

        if escaped:
            current.append(ch)
            escaped = False
            continue

        if state == _SINGLE:
            if ch == "'":
                state = _NORMAL
            current.append(ch)
            continue

        if state == _DOUBLE:
            if ch == "\\":
                escaped = True
            elif ch == '"':
                state = _NORMAL
            current.append(ch)
            continue

        # normal state
        if ch == "\\":
            escaped = True
            current.append(ch)
            continue
        if ch == "'":
            state = _SINGLE
            current.append(ch)
            continue
        if ch == '"':
            state = _DOUBLE
            current.append(ch)
            continue

        # Redirects outside quotes: arbitrary file read/write
        if ch in "<>":
            return Unparseable()

        nxt = cmd[i] if i < length else ""

        if ch == "&" and nxt == "&":
            parts.append("".join(current))
            current = []
            has_chain_op = True
            i += 1
            continue

        # || runs the right side only when the left fails
        if ch == "|" and nxt == "|":
            return Unparseable()

        if ch == ";":
            parts.append("".join(current))
            current = []
            has_chain_op = True
            continue

        # Pipe couples both sides; lone & is background execution
        if ch in "|&":
            return Unparseable()

        current.append(ch)

    # Unclosed quote or trailing backslash
    if state != _NORMAL or escaped:
        return Unparseable()

    parts.append("".join(current))

    if not has_chain_op:
        return Single()

    trimmed = tuple(part.strip() for part in parts)
    if "" in trimmed:
        return Unparseable()

    return Chain(parts=trimmed)


def split_chained_commands(cmd: str) -> list[str] | None:
    """Return the parts of a safely splittable chain, or None.

    >>> split_chained_commands("npm test && npm run build; echo done")
    ['npm test', 'npm run build', 'echo done']
    >>> split_chained_commands("npm test") is None
    True
    """
    result = parse_chained_command(cmd)
    if isinstance(result, Chain):
        return list(result.parts)
    return None
