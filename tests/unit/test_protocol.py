"""Unit tests for hook envelope decoding and decision output."""

import json

import pytest

from gatekeeper.protocol import (
    MalformedEnvelope,
    ToolInvocation,
    build_output,
    decode_envelope,
    make_decision,
)
from gatekeeper.rules import Verdict


# --- decode_envelope ---


def test_decode_bash_envelope(envelope_json):
    invocation = decode_envelope(envelope_json("Bash", "npm test"))
    assert invocation.tool_name == "Bash"
    assert invocation.command == "npm test"
    assert invocation.is_shell
    assert invocation.session_id == "test-session"


def test_decode_ignores_extra_fields(envelope_json):
    raw = envelope_json("Bash", "ls", description="List files", timeout=1000)
    assert decode_envelope(raw).command == "ls"


def test_decode_missing_tool_input():
    invocation = decode_envelope('{"tool_name": "Bash"}')
    assert invocation.tool_input is None
    assert invocation.command == ""


def test_decode_null_command():
    assert decode_envelope('{"tool_name": "Bash", "tool_input": {"command": null}}').command == ""


def test_decode_empty_object():
    invocation = decode_envelope("{}")
    assert invocation.tool_name == ""
    assert not invocation.is_shell


def test_decode_non_shell_tool(envelope_json):
    assert not decode_envelope(envelope_json("Read", file_path="/tmp/x")).is_shell


@pytest.mark.parametrize("raw", ["not json", "{bad", '{"tool_name": "Bash"'])
def test_decode_invalid_json(raw):
    with pytest.raises(MalformedEnvelope, match="invalid JSON input"):
        decode_envelope(raw)


@pytest.mark.parametrize("raw,type_name", [
    ("[]", "array"),
    ('[{"tool_name": "Bash"}]', "array"),
    ("null", "null"),
    ('"Bash"', "string"),
    ("42", "number"),
    ("true", "boolean"),
])
def test_decode_not_an_object(raw, type_name):
    with pytest.raises(MalformedEnvelope, match=f"expected JSON object, got {type_name}"):
        decode_envelope(raw)


@pytest.mark.parametrize("data", [
    {"tool_name": "Bash", "tool_input": {"command": 42}},
    {"tool_name": "Bash", "tool_input": {"command": ["ls"]}},
    {"tool_name": "Bash", "tool_input": "ls"},
    {"tool_name": "Bash", "tool_input": ["ls"]},
])
def test_decode_bad_bash_input(data):
    with pytest.raises(MalformedEnvelope, match="invalid hook input"):
        decode_envelope(json.dumps(data))


@pytest.mark.parametrize("data", [
    {"tool_name": "mcp__runner__exec", "tool_input": {"command": ["ls", "-la"]}},
    {"tool_name": "Read", "tool_input": ["/tmp/x"]},
    {"tool_name": None, "tool_input": {"command": "ls"}},
    {"tool_name": ["Bash"], "tool_input": {"command": "ls"}},
])
def test_decode_other_tools_are_not_validated(data):
    invocation = decode_envelope(json.dumps(data))
    assert not invocation.is_shell
    assert invocation.command == ""


def test_decode_bash_error_names_field():
    with pytest.raises(MalformedEnvelope, match="command: Input should be a valid string"):
        decode_envelope(json.dumps({"tool_name": "Bash", "tool_input": {"command": 42}}))


@pytest.mark.parametrize("session_id,tag", [
    ("0123456789abcdef", "[01234567] "),
    (12345, "[12345] "),
    (None, ""),
    ("", ""),
])
def test_session_tag(session_id, tag):
    data = {"tool_name": "Bash", "tool_input": {"command": "ls"}, "session_id": session_id}
    assert decode_envelope(json.dumps(data)).session_tag == tag


def test_malformed_envelope_is_value_error():
    assert issubclass(MalformedEnvelope, ValueError)


def test_tool_invocation_model_validate():
    invocation = ToolInvocation.model_validate({"tool_name": "Bash", "tool_input": {"command": "ls"}})
    assert invocation.command == "ls"


# --- make_decision / build_output ---


def test_make_decision_allow():
    out = make_decision(Verdict("allow", "Safe git read operation"))
    assert out == {
        "hookSpecificOutput": {
            "hookEventName": "PreToolUse",
            "permissionDecision": "allow",
            "permissionDecisionReason": "Safe git read operation",
        }
    }


def test_make_decision_deny():
    out = make_decision(Verdict("deny", "Disk zeroing blocked"))
    assert out["hookSpecificOutput"]["permissionDecision"] == "deny"
    assert out["hookSpecificOutput"]["permissionDecisionReason"] == "Disk zeroing blocked"


def test_build_output_none_is_silent():
    assert build_output(None) is None


def test_build_output_is_compact_json():
    line = build_output(Verdict("allow", "Safe docker read operation"))
    assert " " not in line.replace("Safe docker read operation", "")
    assert json.loads(line) == make_decision(Verdict("allow", "Safe docker read operation"))


def test_build_output_keeps_unicode():
    line = build_output(Verdict("allow", "Chain allowed — [ls]: Safe file inspection command"))
    assert "—" in line
