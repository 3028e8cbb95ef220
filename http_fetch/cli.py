"""CLI entry point for http-fetch.

Sends one request through HttpFetchService and prints the envelope as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from http_fetch.config_loader import ConfigError, load_request_config
from http_fetch.log import configure_logging
from http_fetch.models import ParameterStyle, RequestConfig
from http_fetch.normalizer import HttpRequestApiException
from http_fetch.service import HttpFetchService

METHODS = ("get", "post", "put", "delete", "patch", "head")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def positive_float(value: str) -> float:
    """Parse and validate a positive float value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive number.
    """
    try:
        result = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number '{value}'.")
    if result <= 0:
        raise argparse.ArgumentTypeError(f"Value must be positive, got {result}.")
    return result


def parse_param(value: str) -> tuple[str, str]:
    """Parse KEY=VALUE.

    Raises:
        argparse.ArgumentTypeError: If format is invalid.
    """
    key, sep, param_value = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(
            f"Invalid format '{value}'. Expected KEY=VALUE (e.g., 'pageSize=20')"
        )
    return key, param_value


def parse_header(value: str) -> tuple[str, str]:
    """Parse 'NAME: VALUE'.

    Raises:
        argparse.ArgumentTypeError: If format is invalid.
    """
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(
            f"Invalid format '{value}'. Expected NAME:VALUE (e.g., 'X-Trace: abc')"
        )
    return name.strip(), header_value.strip()


def parse_json_body(value: str) -> Any:
    """Parse the --data argument as JSON.

    Raises:
        argparse.ArgumentTypeError: If value is not valid JSON.
    """
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid JSON body: {e}")


@dataclass
class RequestArgs:
    """Parsed arguments for request mode."""

    method: str
    url: str
    config: Path | None
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None
    parameter_style: ParameterStyle | None = None
    protocol: str | None = None
    timeout: float | None = None
    log_level: str = "INFO"
    json_logs: bool = False


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the request subcommand."""
    parser = argparse.ArgumentParser(
        prog="http-fetch",
        description="Send HTTP requests with key-case conversion and a uniform response envelope.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    request_parser = subparsers.add_parser(
        "request",
        help="Send one request and print the response envelope as JSON",
    )
    request_parser.add_argument(
        "method",
        type=str.lower,
        choices=METHODS,
        help="HTTP method",
    )
    request_parser.add_argument(
        "url",
        help="Target URL; the protocol is prefixed when missing",
    )
    request_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with service configuration",
    )
    request_parser.add_argument(
        "--param",
        type=parse_param,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        dest="params",
        help="Query parameter (can be repeated)",
    )
    request_parser.add_argument(
        "--header",
        type=parse_header,
        action="append",
        default=[],
        metavar="NAME:VALUE",
        dest="headers",
        help="Request header (can be repeated)",
    )
    request_parser.add_argument(
        "--data",
        type=parse_json_body,
        default=None,
        help="JSON request body",
    )
    request_parser.add_argument(
        "--parameter-style",
        type=str.upper,
        choices=[style.name for style in ParameterStyle],
        default=None,
        help="Key conversion for outgoing payloads (overrides --config)",
    )
    request_parser.add_argument(
        "--protocol",
        default=None,
        help="Protocol prefixed to URLs without one (overrides --config)",
    )
    request_parser.add_argument(
        "--timeout",
        type=positive_float,
        default=None,
        help="Request timeout in seconds (overrides --config)",
    )
    request_parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    request_parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    return parser


def parse_request_args(namespace: argparse.Namespace) -> RequestArgs:
    """Convert parsed namespace to RequestArgs dataclass."""
    return RequestArgs(
        method=namespace.method,
        url=namespace.url,
        config=namespace.config,
        params=dict(namespace.params or []),
        headers=dict(namespace.headers or []),
        data=namespace.data,
        parameter_style=(
            ParameterStyle[namespace.parameter_style] if namespace.parameter_style else None
        ),
        protocol=namespace.protocol,
        timeout=namespace.timeout,
        log_level=namespace.log_level,
        json_logs=namespace.json_logs,
    )


def parse_args(args: list[str] | None = None) -> RequestArgs:
    """Parse command-line arguments and return typed args dataclass.

    Raises:
        SystemExit: If arguments are invalid (argparse behavior).
    """
    parser = build_parser()
    namespace = parser.parse_args(args)
    return parse_request_args(namespace)


def build_request_config(args: RequestArgs) -> RequestConfig:
    """Combine --config with command-line overrides.

    Raises:
        ConfigError: If the config file cannot be loaded.
    """
    overrides: dict[str, Any] = {}
    if args.parameter_style is not None:
        overrides["parameter_style"] = args.parameter_style
    if args.protocol is not None:
        overrides["protocol"] = args.protocol
    if args.timeout is not None:
        overrides["timeout"] = args.timeout

    if args.config is not None:
        return load_request_config(args.config, **overrides)
    return RequestConfig(**overrides)


def build_call_options(args: RequestArgs) -> dict[str, Any]:
    """Per-call options for HttpFetchService.request."""
    options: dict[str, Any] = {}
    if args.params:
        options["params"] = args.params
    if args.data is not None:
        options["data"] = args.data
    if args.headers:
        options["headers"] = args.headers
    return options


async def _send(config: RequestConfig, args: RequestArgs) -> dict[str, Any]:
    async with HttpFetchService(config) as service:
        verb = getattr(service, args.method)
        envelope = await verb(args.url, build_call_options(args))
    return envelope.model_dump()


def run_request(args: RequestArgs) -> int:
    """Run request mode.

    Returns:
        0 when the envelope code is 0, 1 otherwise or on error.
    """
    configure_logging(args.log_level, json_format=args.json_logs)

    try:
        config = build_request_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        envelope = asyncio.run(_send(config, args))
    except HttpRequestApiException as e:
        print(f"Error: {e.msg}", file=sys.stderr)
        return 1

    print(json.dumps(envelope, indent=2, default=str, ensure_ascii=False))
    return 0 if envelope["code"] == 0 else 1


def main() -> int:
    """Main entry point."""
    try:
        return run_request(parse_args())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
