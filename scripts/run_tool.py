"""Invoke a single hotel tool from the command line and print its JSON result."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from hotel_gateway.config.settings import Settings
from hotel_gateway.context import GatewayContext
from hotel_gateway.core.errors import ConfigurationError
from hotel_gateway.core.logging import configure_logging
from hotel_gateway.tools.query import HotelQueryService

TOOL_NAMES = (
    "search_hotels_by_city",
    "search_hotels_by_geocode",
    "get_hotel_offers",
    "get_hotel_offer_details",
    "get_hotel_content",
    "list_supplier_codes",
)


def _decode_argument(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _collect_arguments(args: argparse.Namespace, parser: argparse.ArgumentParser) -> dict[str, Any]:
    arguments: dict[str, Any] = {}
    if args.json_file:
        arguments.update(json.loads(args.json_file.read_text()))
    if args.json:
        arguments.update(json.loads(args.json))
    for entry in args.arg or []:
        if "=" not in entry:
            parser.error(f"Argument must be in KEY=VALUE form (got '{entry}')")
        key, value = entry.split("=", 1)
        arguments[key.strip()] = _decode_argument(value.strip())
    return arguments


async def run(settings: Settings, tool: str, arguments: dict[str, Any], output: Path | None) -> int:
    async with GatewayContext.create(settings) as context:
        service = HotelQueryService(context)
        payload, is_error = await service.dispatch(tool, arguments)
    text = json.dumps(payload, indent=2, default=str)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        logging.getLogger(__name__).info("Wrote %s result to %s", tool, output)
    else:
        print(text)
    return 1 if is_error else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a hotel gateway tool once")
    parser.add_argument("tool", choices=TOOL_NAMES)
    parser.add_argument("--json", help="Tool arguments as a JSON object")
    parser.add_argument("--json-file", type=Path, help="Path to a JSON file with tool arguments")
    parser.add_argument(
        "--arg",
        action="append",
        metavar="KEY=VALUE",
        help="Single tool argument; VALUE is parsed as JSON when possible (repeatable)",
    )
    parser.add_argument("--output", type=Path, help="Write the result here instead of stdout")
    parser.add_argument("--env", choices=("production", "test"), help="Override AMADEUS_ENV")
    parser.add_argument("--log-level", help="Override AMADEUS_LOG_LEVEL")
    args = parser.parse_args()

    overrides: dict[str, Any] = {}
    if args.env:
        overrides["env"] = args.env
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = Settings(**overrides)
    configure_logging(settings.log_level, settings.log_dir)

    arguments = _collect_arguments(args, parser)
    try:
        exit_code = asyncio.run(run(settings, args.tool, arguments, args.output))
    except ConfigurationError as exc:
        logging.getLogger(__name__).error("Fatal: %s", exc)
        sys.exit(2)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
