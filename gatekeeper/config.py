"""
Configuration for the gatekeeper hook.

Everything comes from environment variables; there is no config file.
Configuration only affects diagnostics, never a verdict.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


def _env_flag(name: str) -> bool:
    """Read a boolean env var. Raises ValueError for unrecognized values.

    >>> os.environ["_GK_DOCTEST_FLAG"] = "1"
    >>> _env_flag("_GK_DOCTEST_FLAG")
    True
    >>> del os.environ["_GK_DOCTEST_FLAG"]
    >>> _env_flag("_GK_DOCTEST_FLAG")
    False
    """
    raw = os.getenv(name, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of 1/0/true/false/yes/no/on/off, got {raw!r}")


@dataclass
class GatekeeperConfig:
    """Runtime settings for the hook process.

    Attributes:
        debug: Log parse classification details (GATEKEEPER_DEBUG)
        quiet: Suppress stderr diagnostics (GATEKEEPER_QUIET)
        log_path: Optional file to append decisions to (GATEKEEPER_LOG_PATH)
    """

    debug: bool = False
    quiet: bool = False
    log_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "GatekeeperConfig":
        """Load configuration from environment variables.

        Raises:
            ValueError: If a flag variable holds an unrecognized value
        """
        log_path = os.getenv("GATEKEEPER_LOG_PATH", "").strip()
        return cls(
            debug=_env_flag("GATEKEEPER_DEBUG"),
            quiet=_env_flag("GATEKEEPER_QUIET"),
            log_path=Path(log_path).expanduser() if log_path else None,
        )
