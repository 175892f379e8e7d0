"""Static deny/allow rule tables and single-command matching.

Every pattern is case-insensitive and anchored at the start of the command,
so ``echo rm -rf /`` is just an echo. Deny rules are always consulted
before allow rules.

>>> evaluate_single_command("rm -rf /")
Verdict(decision='deny', reason='Filesystem root deletion blocked')
>>> evaluate_single_command("git push origin main")
Verdict(decision='allow', reason='Safe git push (non-force)')
>>> evaluate_single_command("curl https://example.com") is None
True
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, NamedTuple, Optional


class Rule(NamedTuple):
    """A (pattern, reason) pair. Position in its table is its priority."""

    pattern: re.Pattern
    reason: str

    def matches(self, cmd: str) -> bool:
        return self.pattern.search(cmd) is not None


@dataclass(frozen=True)
class Verdict:
    """An allow or deny decision with a human-readable reason."""

    decision: Literal["allow", "deny"]
    reason: str

    @property
    def allowed(self) -> bool:
        return self.decision == "allow"


def _rule(pattern: str, reason: str) -> Rule:
    return Rule(re.compile(pattern, re.IGNORECASE), reason)


INLINE_EXEC_REASON = "Inline interpreter code execution blocked"
FIND_EXEC_REASON = (
    "find -exec/-execdir/-delete blocked: "
    "potential arbitrary command execution or recursive deletion"
)
GIT_PUSH_REASON = "Safe git push (non-force)"

DENY_RULES: tuple[Rule, ...] = (
    _rule(r"^rm\s+-rf\s+/(?:\s|$)", "Filesystem root deletion blocked"),
    _rule(r"^rm\s+-rf\s+/\*(?:\s|$)", "Destructive wildcard deletion from root blocked"),
    # ~ and ~/... only; ~user/... belongs to someone else and is left to review
    _rule(r"^rm\s+-rf\s+~(?:/|$)", "Home directory deletion blocked"),
    _rule(r"^mkfs\.", "Disk format command blocked"),
    _rule(r"^dd\s+if=/dev/zero\s+of=/dev/", "Disk zeroing blocked"),
    _rule(r"^(?:node|tsx)\s+(?:-e|-p|-c|--eval|--print)\b", INLINE_EXEC_REASON),
    # -p is not listed here: for python it is not an eval flag
    _rule(r"^(?:python3?|ruby|perl)\s+(?:-e|-c|--eval|--print)\b", INLINE_EXEC_REASON),
    # npx -c runs a shell string; npx -p/--package only selects a package
    _rule(r"^npx\s+(?:-c|--call)\b", INLINE_EXEC_REASON),
    _rule(r"^find\b.*\s(?:-exec|-execdir|-delete)\b", FIND_EXEC_REASON),
)

ALLOW_RULES: tuple[Rule, ...] = (
    # exec/x are deliberately absent: both run arbitrary package binaries
    _rule(
        r"^(?:npm|yarn|pnpm|bun)\s+"
        r"(?:test|run|install|ci|add|remove|ls|info|outdated|audit|why)\b",
        "Safe package manager command",
    ),
    _rule(
        r"^git\s+(?:status|log|diff|branch|fetch|remote|tag|show|stash\s+list|rev-parse)\b",
        "Safe git read operation",
    ),
    # push is handled by is_git_push_non_force
    _rule(
        r"^git\s+(?:add|commit|checkout|switch|merge|rebase|stash|pull|cherry-pick)\b",
        "Safe git write operation",
    ),
    _rule(
        r"^(?:node|npx|tsx|python3?|ruby|go\s+run"
        r"|cargo\s+(?:build|run|test|check|clippy)|make|gradle|mvn)\b",
        "Safe build/runtime command",
    ),
    _rule(
        r"^(?:ls|pwd|cat|head|tail|wc|file|which|type|env|echo|printf"
        r"|grep|find|rg|fd|ag|tree)\b",
        "Safe file inspection command",
    ),
    _rule(r"^docker\s+(?:ps|logs|images|inspect|version)\b", "Safe docker read operation"),
)

_GIT_PUSH_RE = re.compile(r"^git\s+push\b", re.IGNORECASE)
# --force, --force-with-lease, or a short-flag cluster containing f (-f, -vf, -fu)
_FORCE_FLAG_RE = re.compile(r"--force(?:-with-lease)?\b|\s-(?!-)\S*f", re.IGNORECASE)


def is_git_push_non_force(cmd: str) -> bool:
    """True for ``git push`` without any force flag.

    >>> is_git_push_non_force("git push -u origin feature")
    True
    >>> is_git_push_non_force("git push -vf origin feature")
    False
    >>> is_git_push_non_force("echo git push")
    False
    """
    return bool(_GIT_PUSH_RE.search(cmd)) and not _FORCE_FLAG_RE.search(cmd)


def match_deny(cmd: str) -> Optional[Rule]:
    """Return the first deny rule matching cmd, if any."""
    for rule in DENY_RULES:
        if rule.matches(cmd):
            return rule
    return None


def match_allow(cmd: str) -> Optional[Rule]:
    """Return the first allow rule matching cmd, if any."""
    for rule in ALLOW_RULES:
        if rule.matches(cmd):
            return rule
    return None


def evaluate_single_command(cmd: str) -> Optional[Verdict]:
    """Evaluate one unchained command against the rule tables.

    Does NOT trim: the patterns are anchored, so leading whitespace is
    treated as an unknown command. Callers trim before calling.

    Returns None for empty input and for commands no rule recognizes.
    """
    if not cmd.strip():
        return None

    rule = match_deny(cmd)
    if rule is not None:
        return Verdict("deny", rule.reason)

    rule = match_allow(cmd)
    if rule is not None:
        return Verdict("allow", rule.reason)

    if is_git_push_non_force(cmd):
        return Verdict("allow", GIT_PUSH_REASON)

    return None
