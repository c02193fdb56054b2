from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
from functools import partial
from pathlib import Path
from typing import Any, Never, Sequence

from rich.console import Console, Group
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich_argparse import RawTextRichHelpFormatter
from remote_code_runner import (
    LANGUAGES,
    ExecutionResult,
    JobStatus,
    PollPolicy,
    RemoteJobClient,
    RemoteSettings,
    RunnerError,
    UnknownLanguageError,
    build_request,
    get_language,
    language_for_path,
)
from remote_code_runner.execution.codec import decode_text

_CONSOLE = Console(no_color=False)
_ERR_CONSOLE = Console(stderr=True)
_SUCCESS_MESSAGE = "Compiled Successfully!"
_ERROR_MESSAGE = "Something went wrong! Please try again."


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m rcr")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(2)


def _add_source_arguments(cmd: argparse.ArgumentParser) -> None:
    """Register the source file, language and stdin options on a subcommand.

    Example:
        ```python
        _add_source_arguments(run_cmd)
        ```
    """
    cmd.add_argument("source_file", help="Path to the program to execute.")
    cmd.add_argument(
        "--language",
        help=(
            "Language key or numeric id (see `languages`).\n"
            "Default: inferred from the file extension."
        ),
    )
    stdin_group = cmd.add_mutually_exclusive_group()
    stdin_group.add_argument("--stdin", help="Text passed to the program on standard input.")
    stdin_group.add_argument("--stdin-file", help="File whose bytes are passed on standard input.")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for remote code execution.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m rcr",
        description=(
            "remote-code-runner CLI\n"
            "Submit programs to a Judge0-compatible execution service\n"
            "and poll until they finish."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m rcr run hello.py\n"
            "  python -m rcr run main.cpp --stdin '3 4'\n"
            "  python -m rcr run main.c --language c --stdin-file input.txt\n"
            "  python -m rcr submit hello.py\n"
            "  python -m rcr status <token>\n"
            "  python -m rcr languages\n\n"
            "Connection:\n"
            "  RAPID_API_URL, RAPID_API_KEY and RAPID_API_HOST are read from the environment;\n"
            "  --api-url, --api-key and --api-host override them."
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "--api-url",
        help=(
            "Submissions endpoint URL.\n"
            "Example: --api-url https://judge0-ce.p.rapidapi.com/submissions"
        ),
    )
    parser.add_argument("--api-key", help="RapidAPI key sent as X-RapidAPI-Key.")
    parser.add_argument("--api-host", help="RapidAPI host sent as X-RapidAPI-Host.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log submissions and every status query to stderr.",
    )

    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_RichArgumentParser,
    )

    run_cmd = sub.add_parser(
        "run",
        help="Submit a program and wait for its result.",
        description=(
            "Submit a program, poll its status until it is terminal,\n"
            "then print the decoded output."
        ),
        epilog=(
            "Examples:\n"
            "  python -m rcr run hello.py\n"
            "  python -m rcr run main.cpp --poll-interval 1 --max-attempts 30"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    _add_source_arguments(run_cmd)
    run_cmd.add_argument("--policy-file", help="TOML polling policy file (see default_policy.toml).")
    run_cmd.add_argument(
        "--poll-interval",
        type=float,
        help="Seconds between status queries (default: 2.0).",
    )
    run_cmd.add_argument(
        "--max-attempts",
        type=int,
        help="Give up after this many status queries (default: unbounded).",
    )
    run_cmd.add_argument(
        "--timeout-seconds",
        type=float,
        help="Give up after this many seconds of polling (default: unbounded).",
    )

    submit_cmd = sub.add_parser(
        "submit",
        help="Submit a program and print its job token.",
        description="Submit a program without waiting; prints the job token.",
        formatter_class=_HELP_FORMATTER,
    )
    _add_source_arguments(submit_cmd)

    status_cmd = sub.add_parser(
        "status",
        help="Query the status of a job token once.",
        description="Issue one status query for a job token and print it.",
        epilog=(
            "Example:\n"
            "  python -m rcr status d85cd024-1548-4165-96c7-7bc88673f194"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    status_cmd.add_argument("token")

    sub.add_parser(
        "languages",
        help="List supported languages.",
        description="Show language keys, ids and file extensions.",
        formatter_class=_HELP_FORMATTER,
    )

    return parser


def build_client(args: argparse.Namespace) -> RemoteJobClient:
    """Create a RemoteJobClient from global CLI connection flags.

    Example:
        ```python
        client = build_client(args)
        ```
    """
    settings = RemoteSettings.from_env(
        submissions_url=args.api_url,
        api_key=args.api_key,
        api_host=args.api_host,
    )
    return RemoteJobClient(settings)


def build_policy(args: argparse.Namespace) -> PollPolicy:
    """Create the polling policy from --policy-file and inline overrides.

    Example:
        ```python
        policy = build_policy(args)
        ```
    """
    policy = PollPolicy.from_file(args.policy_file) if args.policy_file else PollPolicy()
    overrides: dict[str, Any] = {}
    if args.poll_interval is not None:
        overrides["poll_interval_seconds"] = args.poll_interval
        overrides["max_interval_seconds"] = max(policy.max_interval_seconds, args.poll_interval)
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts or None
    if args.timeout_seconds is not None:
        overrides["timeout_seconds"] = args.timeout_seconds or None
    if overrides:
        policy = dataclasses.replace(policy, config_path=None, **overrides)
    return policy


def _configure_logging(verbose: bool) -> None:
    """Route library logs to stderr through Rich when --verbose is set.

    Example:
        ```python
        _configure_logging(True)
        ```
    """
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=_ERR_CONSOLE, show_path=False)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _read_source(args: argparse.Namespace) -> tuple[bytes, bytes, str | int]:
    """Read the program, its stdin and the language selection.

    Example:
        ```python
        source, stdin, language = _read_source(args)
        ```
    """
    path = Path(args.source_file)
    source = path.read_bytes()
    if args.stdin_file:
        stdin = Path(args.stdin_file).read_bytes()
    else:
        stdin = (args.stdin or "").encode("utf-8")
    language: str | int = args.language if args.language else language_for_path(path).key
    return source, stdin, language


def _format_metric(value: float | int | None, unit: str) -> str:
    """Format an optional timing or memory metric.

    Example:
        ```python
        _format_metric(0.012, "s")  # "0.012 s"
        ```
    """
    return "-" if value is None else f"{value} {unit}"


def _print_result(result: ExecutionResult) -> None:
    """Render a terminal result in a rich panel.

    Example:
        ```python
        _print_result(result)
        ```
    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Status", Text(result.status_description or "-"))
    table.add_row("Time", _format_metric(result.time_seconds, "s"))
    table.add_row("Memory", _format_metric(result.memory_kb, "KB"))
    table.add_row("Exit code", "-" if result.exit_code is None else str(result.exit_code))

    parts: list[Any] = [table]
    for label, value in (
        ("stdout", result.stdout),
        ("stderr", result.stderr),
        ("compile output", result.compile_output),
        ("message", result.message),
    ):
        if value:
            parts.append(Panel(Text(decode_text(value)), title=label, title_align="left"))

    if result.ok:
        _CONSOLE.print(Panel(Group(*parts), title=_SUCCESS_MESSAGE, border_style="green"))
    else:
        error = result.error
        title = f"Execution failed: {escape(error.description)}" if error else "Execution failed"
        _CONSOLE.print(Panel(Group(*parts), title=title, border_style="red"))


def _print_status(status: JobStatus) -> None:
    """Render one status query result.

    Example:
        ```python
        _print_status(status)
        ```
    """
    if status.result is not None:
        _print_result(status.result)
        return
    _CONSOLE.print(
        Panel.fit(
            escape(
                f"Job {status.token} is {status.state.value} "
                f"({status.description or 'no description'})"
            ),
            style="bold yellow",
        )
    )


def _print_languages() -> None:
    """Render the language table.

    Example:
        ```python
        _print_languages()
        ```
    """
    table = Table(title="Languages")
    table.add_column("Key", style="cyan")
    table.add_column("ID", style="magenta")
    table.add_column("Name")
    table.add_column("Extensions")
    for lang in LANGUAGES:
        table.add_row(lang.key, str(lang.id), lang.name, " ".join(lang.extensions))
    _CONSOLE.print(table)


def _print_error(exc: BaseException) -> None:
    """Render a client-side failure.

    Example:
        ```python
        _print_error(SubmissionError("HTTP 503"))
        ```
    """
    _CONSOLE.print(
        Panel.fit(f"[bold red]{_ERROR_MESSAGE}[/bold red]\n{escape(str(exc))}", border_style="red")
    )


async def _dispatch(args: argparse.Namespace, client: RemoteJobClient) -> int:
    """Execute one network-backed subcommand.

    Example:
        ```python
        code = await _dispatch(args, client)
        ```
    """
    if args.command == "status":
        _print_status(await client.fetch_status(args.token))
        return 0

    source, stdin, language = _read_source(args)
    request = build_request(source, language=get_language(language), stdin=stdin)
    if args.command == "submit":
        token = await client.submit(request)
        _CONSOLE.print(token)
        return 0

    policy = build_policy(args)
    token = await client.submit(request)
    with _CONSOLE.status(f"Processing job {token}..."):
        result = await client.await_result(token, policy=policy)
    _print_result(result)
    return 0 if result.ok else 1


async def _run_with_client(args: argparse.Namespace) -> int:
    """Create a client, run the subcommand and close the client.

    Example:
        ```python
        code = asyncio.run(_run_with_client(args))
        ```
    """
    client = build_client(args)
    try:
        return await _dispatch(args, client)
    finally:
        await client.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `rcr` CLI command handler.

    Example:
        ```python
        code = main(["run", "hello.py"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)

    if args.command == "languages":
        _print_languages()
        return 0

    try:
        return asyncio.run(_run_with_client(args))
    except (RunnerError, UnknownLanguageError, OSError, ValueError) as exc:
        _print_error(exc)
        return 1
