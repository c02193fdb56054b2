from __future__ import annotations

import logging

from .execution.cancel import CancelToken
from .execution.engine import JobClient
from .execution.types import ExecutionRequest, ExecutionResult
from .languages import Language, get_language
from .policy import PollPolicy

logger = logging.getLogger(__name__)


def _resolve_policy(policy: PollPolicy | None, policy_file: str | None) -> PollPolicy | None:
    """Resolve the effective polling policy for a run.

    ``None`` defers to the client's own default policy.

    Example:
        ```python
        policy = _resolve_policy(None, "/tmp/policy.toml")
        ```
    """
    if policy is not None and policy_file is not None:
        raise ValueError("Provide either 'policy' or 'policy_file', not both")
    if policy is None and policy_file is not None:
        return PollPolicy.from_file(policy_file)
    if policy is not None and policy.config_path is not None:
        return PollPolicy.from_file(policy.config_path)
    return policy


def build_request(
    source: str | bytes,
    *,
    language: str | int | Language,
    stdin: str | bytes = b"",
) -> ExecutionRequest:
    """Build an ExecutionRequest from source text and a language key or id.

    Example:
        ```python
        request = build_request("print(input())", language="python", stdin="hi")
        ```
    """
    resolved = get_language(language)
    return ExecutionRequest.create(language_id=resolved.id, source_code=source, stdin=stdin)


async def run_code(
    source: str | bytes,
    client: JobClient,
    *,
    language: str | int | Language,
    stdin: str | bytes = b"",
    policy: PollPolicy | None = None,
    policy_file: str | None = None,
    cancel: CancelToken | None = None,
) -> ExecutionResult:
    """Run source code on the remote service and return the decoded result.

    Example:
        ```python
        from remote_code_runner import RemoteJobClient, run_code
        async with RemoteJobClient() as client:
            result = await run_code("print(2 + 2)", client, language="python")
        ```
    """
    resolved_policy = _resolve_policy(policy, policy_file)
    request = build_request(source, language=language, stdin=stdin)
    token = await client.submit(request)
    logger.debug("Awaiting job %s", token)
    return await client.await_result(token, policy=resolved_policy, cancel=cancel)
