#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.snailmail.aggregator import EstimateAggregator, mode_details  # noqa: E402
from backend.snailmail.contracts import DeliveryEstimate, LocationInput, TransportMode  # noqa: E402
from backend.snailmail.errors import EstimateError  # noqa: E402
from backend.snailmail.estimate_client import EstimateClient  # noqa: E402
from backend.snailmail.logging_config import configure_structlog  # noqa: E402


def _estimate_json(estimate: DeliveryEstimate) -> dict:
    return estimate.model_dump(mode="json", by_alias=True)


def render_ranking(aggregator: EstimateAggregator, origin: str, destination: str) -> str:
    lines = [f"From: {origin}  ->  To: {destination}"]
    summary = aggregator.summary
    if summary is not None:
        badge = "  [AI Estimate]" if summary.is_ai_estimate else ""
        lines.append(f"Total Distance: {summary.text}{badge}")
    for rank, option in enumerate(aggregator.options, start=1):
        lines.append(
            f"{rank}. {option.emoji} {option.title:<14} {option.estimate.delivery_time_text}"
            f"  ({option.speed_display})"
        )
    return "\n".join(lines)


async def run(args: argparse.Namespace) -> int:
    async with EstimateClient(args.base_url) as client:
        if args.health:
            healthy = await client.health_check()
            print("healthy" if healthy else "unavailable")
            return 0 if healthy else 1

        if args.origin is None or args.destination is None:
            print("origin and destination are required", file=sys.stderr)
            return 2
        try:
            origin = LocationInput.parse(args.origin)
            destination = LocationInput.parse(args.destination)
        except ValueError as exc:
            print(f"Invalid location: {exc}", file=sys.stderr)
            return 2

        try:
            if args.mode:
                estimate = await client.calculate_single(origin, destination, args.mode)
                if args.json:
                    print(json.dumps(_estimate_json(estimate), ensure_ascii=False, indent=2))
                else:
                    details = mode_details(estimate.transport_mode)
                    print(f"{details.emoji} {estimate.delivery_time_text} ({estimate.distance_text})")
                    print(details.description)
                return 0
            results = await client.calculate_all(origin, destination)
        except EstimateError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1

    aggregator = EstimateAggregator(results)
    if args.json:
        payload = {
            "summary": None,
            "options": [
                {
                    "mode": option.mode.value,
                    "title": option.title,
                    "estimate": _estimate_json(option.estimate),
                }
                for option in aggregator.options
            ],
        }
        if aggregator.summary is not None:
            payload["summary"] = {
                "text": aggregator.summary.text,
                "isAiEstimate": aggregator.summary.is_ai_estimate,
            }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(render_ranking(aggregator, origin.label, destination.label))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rank SnailMail delivery options for a route.")
    parser.add_argument("origin", nargs="?", help="Address or 'lat,lng'")
    parser.add_argument("destination", nargs="?", help="Address or 'lat,lng'")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in TransportMode],
        help="Estimate a single transport mode",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    parser.add_argument("--base-url", help="Distance service URL (defaults to SNAILMAIL_API_URL)")
    parser.add_argument("--health", action="store_true", help="Only probe service health")
    parser.add_argument("--verbose", action="store_true", help="Console logs instead of JSON")
    args = parser.parse_args(argv)

    configure_structlog(
        json_logs=not args.verbose,
        level=logging.INFO if args.verbose else logging.WARNING,
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
