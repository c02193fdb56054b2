import os

import pytest

from remote_code_runner import PollPolicy, RemoteJobClient, RemoteSettings, run_code


def _service_ready() -> bool:
    if not os.getenv("RAPID_API_URL"):
        return False
    return os.getenv("RUN_REMOTE_TESTS") == "1"


pytestmark = pytest.mark.skipif(not _service_ready(), reason="Remote service integration tests disabled")

POLICY = PollPolicy(poll_interval_seconds=1.0, timeout_seconds=60, poll_retries=2)


@pytest.mark.asyncio
async def test_remote_python_echoes_stdin() -> None:
    async with RemoteJobClient(RemoteSettings.from_env()) as client:
        result = await run_code(
            "print(input()[::-1])",
            client,
            language="python",
            stdin="stressed",
            policy=POLICY,
        )
    assert result.ok is True
    assert result.stdout == b"desserts\n"


@pytest.mark.asyncio
async def test_remote_compile_error_is_reported_as_data() -> None:
    async with RemoteJobClient(RemoteSettings.from_env()) as client:
        result = await run_code("int main( {", client, language="cpp", policy=POLICY)
    assert result.ok is False
    assert result.error is not None
    assert result.error.kind == "compilation"
