from pathlib import Path

import pytest

from remote_code_runner import PollPolicy


def test_bundled_defaults_poll_every_two_seconds_without_bounds() -> None:
    policy = PollPolicy()
    assert policy.poll_interval_seconds == 2.0
    assert policy.backoff_multiplier == 1.0
    assert policy.max_attempts is None
    assert policy.timeout_seconds is None
    assert policy.poll_retries == 0


def test_fixed_interval_without_backoff() -> None:
    policy = PollPolicy(poll_interval_seconds=1.5)
    assert [policy.interval_for(n) for n in (1, 2, 5)] == [1.5, 1.5, 1.5]


def test_from_file_reads_policy_table(tmp_path: Path) -> None:
    policy_file = tmp_path / "policy.toml"
    policy_file.write_text(
        "[policy]\n"
        "poll_interval_seconds = 1\n"
        "backoff_multiplier = 1.5\n"
        "max_interval_seconds = 10\n"
        "max_attempts = 20\n"
        "timeout_seconds = 90\n"
        "poll_retries = 2\n",
        encoding="utf-8",
    )

    policy = PollPolicy.from_file(str(policy_file))

    assert policy.poll_interval_seconds == 1.0
    assert policy.backoff_multiplier == 1.5
    assert policy.max_attempts == 20
    assert policy.timeout_seconds == 90.0
    assert policy.poll_retries == 2
    assert policy.config_path == str(policy_file)


def test_from_file_zero_bounds_mean_unbounded(tmp_path: Path) -> None:
    policy_file = tmp_path / "policy.toml"
    policy_file.write_text("max_attempts = 0\ntimeout_seconds = 0\n", encoding="utf-8")

    policy = PollPolicy.from_file(str(policy_file))

    assert policy.max_attempts is None
    assert policy.timeout_seconds is None


def test_from_file_rejects_non_numeric_bounds(tmp_path: Path) -> None:
    policy_file = tmp_path / "policy.toml"
    policy_file.write_text('[policy]\nmax_attempts = "many"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="max_attempts"):
        PollPolicy.from_file(str(policy_file))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"poll_interval_seconds": -1},
        {"backoff_multiplier": 0.5},
        {"poll_interval_seconds": 10, "max_interval_seconds": 5},
        {"max_attempts": 0},
        {"timeout_seconds": 0},
        {"poll_retries": -1},
    ],
)
def test_invalid_policy_values_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        PollPolicy(**kwargs)
