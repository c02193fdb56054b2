from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def _default_policy_path() -> Path:
    """Return bundled default policy TOML path.

    Example:
        ```python
        path = _default_policy_path()
        ```
    """
    return Path(__file__).with_name("default_policy.toml")


def _read_policy_toml(path: Path) -> dict[str, Any]:
    """Read policy TOML and return normalized policy dictionary.

    Example:
        ```python
        raw = _read_policy_toml(Path("/tmp/policy.toml"))
        ```
    """
    if not path.exists():
        return {
            "poll_interval_seconds": 2.0,
            "backoff_multiplier": 1.0,
            "max_interval_seconds": 30.0,
            "poll_retries": 0,
            "retry_backoff_seconds": 0.5,
        }
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    policy_obj = raw.get("policy", raw)
    if not isinstance(policy_obj, dict):
        raise ValueError("Policy config must be a TOML table")
    return policy_obj


def _optional_number(value: Any, field_name: str, cast: type) -> Any:
    """Validate an optional numeric policy field; 0 and absent mean unbounded.

    Example:
        ```python
        attempts = _optional_number(10, "max_attempts", int)
        ```
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{field_name}' must be a number")
    if value == 0:
        return None
    return cast(value)


_DEFAULT_POLICY_RAW = _read_policy_toml(_default_policy_path())
DEFAULT_POLL_INTERVAL_SECONDS = float(_DEFAULT_POLICY_RAW.get("poll_interval_seconds", 2.0))
DEFAULT_BACKOFF_MULTIPLIER = float(_DEFAULT_POLICY_RAW.get("backoff_multiplier", 1.0))
DEFAULT_MAX_INTERVAL_SECONDS = float(_DEFAULT_POLICY_RAW.get("max_interval_seconds", 30.0))
DEFAULT_MAX_ATTEMPTS = _optional_number(
    _DEFAULT_POLICY_RAW.get("max_attempts"), "max_attempts", int
)
DEFAULT_TIMEOUT_SECONDS = _optional_number(
    _DEFAULT_POLICY_RAW.get("timeout_seconds"), "timeout_seconds", float
)
DEFAULT_POLL_RETRIES = int(_DEFAULT_POLICY_RAW.get("poll_retries", 0))
DEFAULT_RETRY_BACKOFF_SECONDS = float(_DEFAULT_POLICY_RAW.get("retry_backoff_seconds", 0.5))


@dataclass(slots=True)
class PollPolicy:
    """Polling policy for awaiting a remote job.

    ``max_attempts`` and ``timeout_seconds`` of ``None`` poll until the job
    reaches a terminal status. ``poll_retries`` counts extra attempts for a
    status query that fails at the transport level.

    Example:
        ```python
        policy = PollPolicy(poll_interval_seconds=1.0, max_attempts=30)
        ```
    """

    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    max_interval_seconds: float = DEFAULT_MAX_INTERVAL_SECONDS
    max_attempts: int | None = DEFAULT_MAX_ATTEMPTS
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS
    poll_retries: int = DEFAULT_POLL_RETRIES
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS
    config_path: str | None = None

    def __post_init__(self) -> None:
        """Validate bounds after dataclass initialization.

        Example:
            ```python
            PollPolicy(backoff_multiplier=2.0)
            ```
        """
        if self.poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")
        if self.max_interval_seconds < self.poll_interval_seconds:
            raise ValueError("max_interval_seconds must be >= poll_interval_seconds")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if self.poll_retries < 0:
            raise ValueError("poll_retries must be >= 0")
        if self.retry_backoff_seconds < 0:
            raise ValueError("retry_backoff_seconds must be >= 0")

    def interval_for(self, attempt: int) -> float:
        """Return the suspension before status query ``attempt + 1``.

        Example:
            ```python
            delay = PollPolicy(backoff_multiplier=2.0).interval_for(3)
            ```
        """
        delay = self.poll_interval_seconds * (self.backoff_multiplier ** max(0, attempt - 1))
        return min(delay, self.max_interval_seconds)

    @classmethod
    def from_file(cls, config_path: str) -> "PollPolicy":
        """Create a policy instance from a TOML file.

        Example:
            ```python
            policy = PollPolicy.from_file("/tmp/policy.toml")
            ```
        """
        raw = _read_policy_toml(Path(config_path))
        return cls(
            poll_interval_seconds=float(
                raw.get("poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS)
            ),
            backoff_multiplier=float(raw.get("backoff_multiplier", DEFAULT_BACKOFF_MULTIPLIER)),
            max_interval_seconds=float(
                raw.get("max_interval_seconds", DEFAULT_MAX_INTERVAL_SECONDS)
            ),
            max_attempts=_optional_number(
                raw.get("max_attempts", DEFAULT_MAX_ATTEMPTS), "max_attempts", int
            ),
            timeout_seconds=_optional_number(
                raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS), "timeout_seconds", float
            ),
            poll_retries=int(raw.get("poll_retries", DEFAULT_POLL_RETRIES)),
            retry_backoff_seconds=float(
                raw.get("retry_backoff_seconds", DEFAULT_RETRY_BACKOFF_SECONDS)
            ),
            config_path=config_path,
        )
