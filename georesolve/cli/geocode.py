# =============================================================================
# georesolve/cli/geocode.py: Command-line front end for the resolution stack
# =============================================================================
#
# Four subcommands, each a thin wrapper over one service call:
#
#   geocode DESCRIPTION   extractor -> resolver chain (DescriptionGeocoder)
#   resolve NAME          resolver only (GeocodingService)
#   extract DESCRIPTION   extractor only (LocationExtractor)
#   sweep                 delete expired cache entries once
#
# Results go to stdout; structlog output goes to stderr so `--json` output
# can be piped straight into jq.
# =============================================================================

"""Command-line interface for disaster-location geocoding.

Usage::

    python -m georesolve.cli geocode "Flooding near Lower East Side, Manhattan"
    python -m georesolve.cli geocode "Paris, France" --no-extract --json
    python -m georesolve.cli resolve "Nowhereland"
    python -m georesolve.cli extract "Wildfire spreading outside Boulder"
    python -m georesolve.cli sweep
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from georesolve.config.settings import Settings
from georesolve.models.geocode import GeocodeResult, LocationResolution
from georesolve.utils.errors import ConfigurationError, InputValidationError
from georesolve.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_coordinates(result: GeocodeResult | LocationResolution) -> str:
    if result.latitude is None or result.longitude is None:
        return "unresolved"
    return f"{result.latitude:.6f}, {result.longitude:.6f}"


def _format_result(result: GeocodeResult) -> str:
    lines = [
        f"Address:     {result.formatted_address}",
        f"Coordinates: {_format_coordinates(result)}",
        f"Provider:    {result.provider}",
        f"Confidence:  {result.confidence.value}",
    ]
    return "\n".join(lines)


def _format_resolution(resolution: LocationResolution) -> str:
    lines = [
        f"Description: {resolution.original_description}",
        f"Extracted:   {resolution.extracted_location or '-'}",
        f"Geocoded as: {resolution.location_name}",
        f"Address:     {resolution.formatted_address}",
        f"Coordinates: {_format_coordinates(resolution)}",
        f"Provider:    {resolution.provider}",
        f"Confidence:  {resolution.confidence.value}",
    ]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Command runner
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    """Build the stack, run one subcommand, print its output.

    Returns 0 on success, 1 on invalid input or configuration.
    """
    # Deferred so `--help` doesn't pay for provider SDK imports.
    from georesolve.main import build_resolution_stack

    try:
        stack = await build_resolution_stack(settings, config_path=args.config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command == "geocode":
            resolution = await stack.geocoder.geocode_description(
                args.description, extract_location=not args.no_extract
            )
            text = (
                resolution.model_dump_json(indent=2)
                if args.json
                else _format_resolution(resolution)
            )
        elif args.command == "resolve":
            result = await stack.resolver.geocode(args.location_name)
            text = result.model_dump_json(indent=2) if args.json else _format_result(result)
        elif args.command == "extract":
            location = await stack.extractor.extract(args.description)
            if args.json:
                text = json.dumps(
                    {"location": location, "found": stack.extractor.is_location(location)},
                    indent=2,
                )
            else:
                text = location
        else:
            removed = await stack.cache.sweep_expired()
            if args.json:
                text = json.dumps({"removed": removed, "backend": stack.cache.backend}, indent=2)
            else:
                text = f"Removed {removed} expired cache entries ({stack.cache.backend})"
    except InputValidationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        await stack.aclose()

    print(text)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="georesolve",
        description="Resolve disaster descriptions and place names to coordinates.",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Path to the YAML config file (default: config/config.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show INFO-level logs on stderr",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_geocode = sub.add_parser("geocode", help="Extract a place from a description and geocode it")
    p_geocode.add_argument("description", help="Free-text disaster description")
    p_geocode.add_argument(
        "--no-extract",
        action="store_true",
        help="Geocode the description as-is, skipping location extraction",
    )

    p_resolve = sub.add_parser("resolve", help="Geocode a place name directly")
    p_resolve.add_argument("location_name", help="Place name, e.g. 'Paris, France'")

    p_extract = sub.add_parser("extract", help="Only extract the place name from a description")
    p_extract.add_argument("description", help="Free-text disaster description")

    sub.add_parser("sweep", help="Delete expired cache entries")

    for p in (p_geocode, p_resolve, p_extract, sub.choices["sweep"]):
        p.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = _build_parser().parse_args(argv)

    settings = Settings()
    configure_logging(
        log_level="INFO" if args.verbose else "WARNING",
        json_output=settings.app_env == "production",
        stream=sys.stderr,
    )
    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
