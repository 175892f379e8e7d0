"""
Claude Gatekeeper - local allow/deny classification for agent shell commands.

A PreToolUse hook that auto-approves recognizably safe Bash commands,
blocks a small set of catastrophic ones, and stays silent for everything
else so a downstream reviewer can decide.
"""

__version__ = "0.3.0"

from gatekeeper.chain_parser import Chain, Single, Unparseable, parse_chained_command  # noqa: E402
from gatekeeper.evaluator import evaluate, evaluate_command  # noqa: E402
from gatekeeper.rules import Verdict  # noqa: E402

__all__ = [
    "__version__",
    "Chain",
    "Single",
    "Unparseable",
    "Verdict",
    "evaluate",
    "evaluate_command",
    "parse_chained_command",
]
