from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping
from urllib.parse import urlparse

ENV_API_URL = "RAPID_API_URL"
ENV_API_KEY = "RAPID_API_KEY"
ENV_API_HOST = "RAPID_API_HOST"
DEFAULT_SUBMISSIONS_URL = "https://judge0-ce.p.rapidapi.com/submissions"
QUERY_PARAMS = {"base64_encoded": "true", "fields": "*"}


@dataclass(frozen=True, slots=True)
class RemoteSettings:
    """Connection settings for the remote execution service.

    ``submissions_url`` is the collection endpoint; a job's status lives at
    ``{submissions_url}/{token}``.

    Example:
        ```python
        settings = RemoteSettings(submissions_url="https://judge0.example/submissions", api_key="k")
        ```
    """

    submissions_url: str = DEFAULT_SUBMISSIONS_URL
    api_key: str | None = None
    api_host: str | None = None
    request_timeout_seconds: float = 25.0
    connect_timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        """Validate the endpoint URL and timeouts.

        Example:
            ```python
            RemoteSettings(submissions_url="http://localhost:2358/submissions")
            ```
        """
        parsed = urlparse(self.submissions_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(
                f"submissions_url must be an absolute http(s) URL, got {self.submissions_url!r}"
            )
        if self.request_timeout_seconds <= 0 or self.connect_timeout_seconds <= 0:
            raise ValueError("timeouts must be positive")

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        submissions_url: str | None = None,
        api_key: str | None = None,
        api_host: str | None = None,
    ) -> "RemoteSettings":
        """Build settings from environment variables with explicit overrides.

        Example:
            ```python
            settings = RemoteSettings.from_env(api_key="override")
            ```
        """
        source = os.environ if env is None else env
        url = submissions_url or source.get(ENV_API_URL) or DEFAULT_SUBMISSIONS_URL
        return cls(
            submissions_url=url.rstrip("/"),
            api_key=api_key or source.get(ENV_API_KEY) or None,
            api_host=api_host or source.get(ENV_API_HOST) or None,
        )

    def status_url(self, token: str) -> str:
        """Return the status endpoint for one job token.

        Example:
            ```python
            url = settings.status_url("d85cd024-1548-4165-96c7-7bc88673f194")
            ```
        """
        if not token:
            raise ValueError("token must be a non-empty string")
        return f"{self.submissions_url.rstrip('/')}/{token}"

    def headers(self) -> dict[str, str]:
        """Return request headers, adding RapidAPI credentials when configured.

        Example:
            ```python
            headers = settings.headers()
            ```
        """
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-RapidAPI-Key"] = self.api_key
        if self.api_host:
            headers["X-RapidAPI-Host"] = self.api_host
        return headers
