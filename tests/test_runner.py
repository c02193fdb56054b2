from pathlib import Path

import pytest

from remote_code_runner import (
    ExecutionResult,
    PollPolicy,
    UnknownLanguageError,
    build_request,
    run_code,
)


class _RecordingClient:
    def __init__(self) -> None:
        self.submitted = []
        self.policies = []

    async def submit(self, request):
        self.submitted.append(request)
        return "tok-9"

    async def fetch_status(self, token, *, policy=None, cancel=None, deadline=None):
        raise NotImplementedError

    async def await_result(self, token, *, policy=None, cancel=None):
        self.policies.append(policy)
        return ExecutionResult(token=token, status_id=3, status_description="Accepted", stdout=b"4\n")


@pytest.mark.asyncio
async def test_run_code_resolves_language_and_awaits_result() -> None:
    client = _RecordingClient()

    result = await run_code("print(2 + 2)", client, language="python", stdin="x")

    assert result.stdout == b"4\n"
    request = client.submitted[0]
    assert request.language_id == 71
    assert request.source_code == b"print(2 + 2)"
    assert request.stdin == b"x"
    assert client.policies == [None]


@pytest.mark.asyncio
async def test_run_code_loads_policy_file(tmp_path: Path) -> None:
    policy_file = tmp_path / "policy.toml"
    policy_file.write_text("[policy]\npoll_interval_seconds = 0.5\nmax_attempts = 4\n", encoding="utf-8")
    client = _RecordingClient()

    await run_code("int main(){}", client, language="cpp", policy_file=str(policy_file))

    policy = client.policies[0]
    assert policy.poll_interval_seconds == 0.5
    assert policy.max_attempts == 4


@pytest.mark.asyncio
async def test_run_code_rejects_policy_and_policy_file() -> None:
    with pytest.raises(ValueError, match="either 'policy' or 'policy_file'"):
        await run_code("x", _RecordingClient(), language="python", policy=PollPolicy(), policy_file="p.toml")


@pytest.mark.asyncio
async def test_run_code_unknown_language_submits_nothing() -> None:
    client = _RecordingClient()
    with pytest.raises(UnknownLanguageError):
        await run_code("x", client, language="cobol-2099")
    assert client.submitted == []


def test_build_request_accepts_numeric_language_and_bytes() -> None:
    request = build_request(b"\x00\xff", language=54)
    assert request.language_id == 54
    assert request.source_code == b"\x00\xff"
    assert request.stdin == b""
