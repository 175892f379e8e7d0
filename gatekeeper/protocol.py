"""PreToolUse hook protocol: envelope decoding and decision output.

Pure functions, no I/O. The hook process reads one JSON object from stdin,
decodes it here into a typed ToolInvocation, and writes back the decision
object built by make_decision (or nothing at all, which means "defer").

>>> decode_envelope('{"tool_name": "Bash", "tool_input": {"command": "ls"}}').command
'ls'
>>> build_output(None) is None
True
"""

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from gatekeeper.rules import Verdict

SHELL_TOOL_NAME = "Bash"
HOOK_EVENT_NAME = "PreToolUse"


class MalformedEnvelope(ValueError):
    """The hook input is not a single, valid JSON object."""


class ToolInput(BaseModel):
    """The ``tool_input`` block. Only ``command`` matters to the gatekeeper."""

    model_config = ConfigDict(extra="ignore")

    command: Optional[str] = None


def _summarize_errors(e: ValidationError) -> str:
    return f"{e.error_count()} validation error(s): " + "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()
    )


class ToolInvocation(BaseModel):
    """Pydantic v2 model for a PreToolUse hook envelope.

    Only Bash envelopes are held to a shape: their ``tool_input`` must decode
    as a ToolInput. Other tools pass through untouched, whatever their input
    looks like, so they can be deferred.
    """

    model_config = ConfigDict(extra="ignore")

    tool_name: Any = ""
    tool_input: Any = None
    session_id: Any = None

    @model_validator(mode="after")
    def _validate_shell_input(self) -> "ToolInvocation":
        if self.is_shell and self.tool_input is not None:
            try:
                self.tool_input = ToolInput.model_validate(self.tool_input)
            except ValidationError as e:
                raise ValueError(f"Bash tool_input: {_summarize_errors(e)}") from e
        return self

    @property
    def command(self) -> str:
        if isinstance(self.tool_input, ToolInput) and self.tool_input.command is not None:
            return self.tool_input.command
        return ""

    @property
    def is_shell(self) -> bool:
        return self.tool_name == SHELL_TOOL_NAME

    @property
    def session_tag(self) -> str:
        """Log prefix built from the first 8 characters of the session id."""
        if self.session_id is None or self.session_id == "":
            return ""
        return f"[{str(self.session_id)[:8]}] "


def _json_type_name(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, list):
        return "array"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def decode_envelope(raw: str) -> ToolInvocation:
    """Decode raw hook input into a ToolInvocation.

    Raises MalformedEnvelope for invalid JSON, for anything other than a
    single JSON object, and for Bash envelopes whose command is not a string.

    >>> decode_envelope('[1, 2]')
    Traceback (most recent call last):
    ...
    gatekeeper.protocol.MalformedEnvelope: expected JSON object, got array
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, ValueError) as e:
        raise MalformedEnvelope(f"invalid JSON input: {e}") from e

    if not isinstance(data, dict):
        raise MalformedEnvelope(f"expected JSON object, got {_json_type_name(data)}")

    try:
        return ToolInvocation.model_validate(data)
    except ValidationError as e:
        raise MalformedEnvelope(f"invalid hook input: {_summarize_errors(e)}") from e


def make_decision(verdict: Verdict) -> dict:
    """Build the hookSpecificOutput object for a verdict.

    >>> make_decision(Verdict("deny", "Disk zeroing blocked"))["hookSpecificOutput"]["permissionDecision"]
    'deny'
    """
    return {
        "hookSpecificOutput": {
            "hookEventName": HOOK_EVENT_NAME,
            "permissionDecision": verdict.decision,
            "permissionDecisionReason": verdict.reason,
        }
    }


def build_output(verdict: Optional[Verdict]) -> Optional[str]:
    """Compact JSON for a verdict, or None when the hook should stay silent.

    >>> build_output(Verdict("allow", "Safe git read operation"))
    '{"hookSpecificOutput":{"hookEventName":"PreToolUse","permissionDecision":"allow","permissionDecisionReason":"Safe git read operation"}}'
    """
    if verdict is None:
        return None
    return json.dumps(make_decision(verdict), separators=(",", ":"), ensure_ascii=False)
