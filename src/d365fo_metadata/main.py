"""
D365FO Metadata command line

Entry point for public entity / public enumeration lookups and the MCP server.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence
import structlog

from .config import load_dotenv_if_exists, get_settings
from .errors import MetadataQueryError
from .result import QueryResult
from .server_factory import ServerFactory, ServerValidator
from .services import PublicMetadataService
from .shaping import ShapedOutput

logger = structlog.get_logger(__name__)

CONNECTION_OPTIONS = ("tenant", "url", "system_url", "client_id", "client_secret", "token")
LOG_LEVELS = ("debug", "info", "warning", "error")


def configure_logging(level: str = "info") -> None:
    """Configure structured logging to stderr; stdout carries results"""
    unknown_level = level.lower() not in LOG_LEVELS
    log_level = logging.INFO if unknown_level else getattr(logging, level.upper())
    logging.basicConfig(stream=sys.stderr, format="%(message)s", level=log_level, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if unknown_level:
        logger.warning("Unknown log level, using info", log_level=level)


def _add_query_arguments(parser: argparse.ArgumentParser, noun: str) -> None:
    names = parser.add_mutually_exclusive_group()
    names.add_argument("--name", help=f"Exact {noun} name (case-insensitive)")
    names.add_argument("--name-contains", help=f"Text contained in the {noun} name (case-insensitive)")
    parser.add_argument(
        "--odata-query",
        help="OData options appended to the request, e.g. '$top=10'",
    )

    connection = parser.add_argument_group("connection (overrides D365FO_* defaults)")
    connection.add_argument("--tenant", help="Azure AD tenant id")
    connection.add_argument("--url", help="D365 environment url, also the token audience")
    connection.add_argument("--system-url", help="Url used for the OData request, defaults to --url")
    connection.add_argument("--client-id", help="Azure AD application id")
    connection.add_argument("--client-secret", help="Azure AD application secret")
    connection.add_argument("--token", help="Bearer token to use instead of requesting one")

    output = parser.add_argument_group("output")
    output.add_argument("--raw-output", action="store_true", help="Print the response document unchanged")
    output.add_argument("--output-as-json", action="store_true", help="Print JSON instead of a record list")
    parser.add_argument(
        "--enable-exception",
        action="store_true",
        help="Raise errors instead of logging a warning and exiting with status 1",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="d365fo-metadata",
        description="Query D365 Finance & Operations public entity and enumeration metadata",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Log level (default: D365FO_LOG_LEVEL or info)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    entities = commands.add_parser("entities", help="Get public entities")
    _add_query_arguments(entities, "entity")
    entities.add_argument(
        "--out-names-only",
        action="store_true",
        help="Only print data entity name and entity set name",
    )

    enums = commands.add_parser("enums", help="Get public enumerations, one line per member")
    _add_query_arguments(enums, "enum")

    serve = commands.add_parser("serve", help="Run the MCP server")
    serve.add_argument(
        "--transport",
        choices=["stdio"],
        default="stdio",
        help="Transport mode (currently only stdio supported)",
    )

    commands.add_parser("validate-config", help="Validate configuration and token acquisition")
    return parser


def render(output: ShapedOutput) -> str:
    """Render shaped output for the console"""
    if isinstance(output, str):
        return output
    if isinstance(output, dict):
        return json.dumps(output, indent=2, default=str)
    return format_records(output)


def format_records(records: List[Dict[str, Any]]) -> str:
    """One 'key : value' block per record, keys aligned within the block"""
    blocks = []
    for record in records:
        width = max((len(key) for key in record), default=0)
        lines = []
        for key, value in record.items():
            if isinstance(value, (dict, list)):
                value = json.dumps(value, default=str)
            lines.append(f"{key.ljust(width)} : {'' if value is None else value}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


async def run_query(args: argparse.Namespace, service: PublicMetadataService) -> QueryResult[ShapedOutput]:
    connection = {option: getattr(args, option) for option in CONNECTION_OPTIONS}
    if args.command == "entities":
        return await service.get_public_entities(
            name=args.name,
            name_contains=args.name_contains,
            odata_query=args.odata_query,
            raw_output=args.raw_output,
            out_names_only=args.out_names_only,
            output_as_json=args.output_as_json,
            **connection,
        )
    return await service.get_public_enums(
        name=args.name,
        name_contains=args.name_contains,
        odata_query=args.odata_query,
        raw_output=args.raw_output,
        output_as_json=args.output_as_json,
        **connection,
    )


def report_failure(error: MetadataQueryError, enable_exception: bool) -> int:
    """Raise the error, or log a warning and return exit status 1"""
    if enable_exception:
        raise error
    logger.warning(
        "Something went wrong while retrieving data",
        search_term=error.search_term,
        error=str(error),
    )
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with command line argument parsing"""
    load_dotenv_if_exists()

    args = build_parser().parse_args(argv)
    # Logging is set up before settings are read so nothing reaches stdout
    configure_logging(args.log_level or os.getenv("D365FO_LOG_LEVEL", "info"))

    try:
        settings = get_settings()
    except MetadataQueryError as e:
        if e.search_term is None:
            e.search_term = getattr(args, "name", None) or getattr(args, "name_contains", None)
        return report_failure(e, getattr(args, "enable_exception", False))

    if args.command == "validate-config":
        return 0 if asyncio.run(ServerValidator.validate_configuration(settings)) else 1

    if args.command == "serve":
        try:
            mcp = ServerFactory.create_configured_server(settings)
        except Exception as e:
            logger.error("Failed to initialize server", error=str(e))
            return 1

        logger.info("Starting D365FO metadata MCP server", transport=args.transport)
        mcp.run(transport=args.transport)
        return 0

    service = PublicMetadataService.from_settings(settings)
    result = asyncio.run(run_query(args, service))

    if not result.ok:
        return report_failure(result.error, args.enable_exception)

    print(render(result.value))
    return 0


if __name__ == "__main__":
    sys.exit(main())
