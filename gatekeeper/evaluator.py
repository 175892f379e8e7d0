"""Evaluate a tool invocation into allow, deny, or no verdict (defer).

Order of evaluation:
  1. Tool check: only Bash commands with a non-empty command are considered
  2. Deny fast path on the whole trimmed command
  3. Chain parse: unparseable structure defers
  4. Single command or every chain part through the rule tables

A chain is allowed only when every part is allowed. Any denied part denies
the whole chain, and any unknown part defers it.
"""

import logging
from typing import Optional

from gatekeeper.chain_parser import Single, Unparseable, parse_chained_command
from gatekeeper.protocol import ToolInvocation
from gatekeeper.rules import Verdict, evaluate_single_command, match_deny

logger = logging.getLogger(__name__)

CHAIN_ALLOW_PREFIX = "Chain allowed — "


def _composite_reason(reasons: list[tuple[str, str]]) -> str:
    return CHAIN_ALLOW_PREFIX + "; ".join(f"[{part}]: {reason}" for part, reason in reasons)


def evaluate_command(command: str) -> Optional[Verdict]:
    """Evaluate a bare command string. Returns None to defer."""
    cmd = command.strip()
    if not cmd:
        return None

    # Deny check on the full command catches a destructive command even
    # when the rest of the string is malformed or unparseable
    rule = match_deny(cmd)
    if rule is not None:
        logger.info('deny "%s" — %s', cmd, rule.reason)
        return Verdict("deny", rule.reason)

    parsed = parse_chained_command(cmd)
    logger.debug('parsed "%s" as %s', cmd, parsed.kind)

    if isinstance(parsed, Unparseable):
        logger.info('passthrough "%s" — unparseable structure', cmd)
        return None

    if isinstance(parsed, Single):
        result = evaluate_single_command(cmd)
        if result is None:
            logger.info('passthrough "%s" — no matching rule', cmd)
            return None
        logger.info('%s "%s" — %s', result.decision, cmd, result.reason)
        return result

    results = [(part, evaluate_single_command(part)) for part in parsed.parts]

    # Deny wins over an unknown part, wherever each sits in the chain
    for part, result in results:
        if result is not None and not result.allowed:
            logger.info('deny "%s" — part "%s": %s', cmd, part, result.reason)
            return result

    reasons: list[tuple[str, str]] = []
    for part, result in results:
        if result is None:
            logger.info('passthrough "%s" — unknown part "%s"', cmd, part)
            return None
        reasons.append((part, result.reason))

    verdict = Verdict("allow", _composite_reason(reasons))
    logger.info('allow "%s" — %s', cmd, verdict.reason)
    return verdict


def evaluate(invocation: ToolInvocation) -> Optional[Verdict]:
    """Evaluate a decoded hook invocation. Non-shell tools always defer."""
    if not invocation.is_shell:
        logger.debug("ignoring tool %s", invocation.tool_name or "<none>")
        return None
    return evaluate_command(invocation.command)
