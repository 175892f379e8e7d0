"""Shared fixtures for gatekeeper tests."""

import json
import logging

import pytest

from gatekeeper.protocol import ToolInvocation


STUB_ENVELOPE = {
    "session_id": "test-session",
    "transcript_path": "/tmp/transcript",
    "cwd": "/tmp/project",
    "hook_event_name": "PreToolUse",
    "tool_use_id": "test-tool-use-id",
}


@pytest.fixture
def envelope():
    """Factory for raw hook envelope dicts."""
    def _create(tool_name="Bash", command=None, **tool_input):
        data = {**STUB_ENVELOPE, "tool_name": tool_name}
        if command is not None:
            tool_input["command"] = command
        data["tool_input"] = tool_input
        return data
    return _create


@pytest.fixture
def bash(envelope):
    """Factory for decoded Bash ToolInvocation objects."""
    def _create(command):
        return ToolInvocation.model_validate(envelope("Bash", command))
    return _create


@pytest.fixture
def envelope_json(envelope):
    """Factory for serialized hook envelopes."""
    def _create(tool_name="Bash", command=None, **tool_input):
        return json.dumps(envelope(tool_name, command, **tool_input))
    return _create


@pytest.fixture(autouse=True)
def reset_gatekeeper_logger():
    """Undo hook logging setup so caplog sees gatekeeper records again."""
    yield
    from gatekeeper import hook

    gk_logger = logging.getLogger("gatekeeper")
    for handler in hook._installed_handlers:
        gk_logger.removeHandler(handler)
        handler.close()
    hook._installed_handlers.clear()
    gk_logger.propagate = True
    gk_logger.setLevel(logging.NOTSET)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove gatekeeper env vars so config defaults apply."""
    for name in ("GATEKEEPER_DEBUG", "GATEKEEPER_QUIET", "GATEKEEPER_LOG_PATH"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
