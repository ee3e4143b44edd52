#!/usr/bin/env python
"""Run a single farm analysis against a JSON data file."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from farm_insights.clients import InMemoryCacheStore, OpenRouterClient  # noqa: E402
from farm_insights.core.config import get_settings  # noqa: E402
from farm_insights.core.logging import configure_logging  # noqa: E402
from farm_insights.schemas import AnalysisOptions, AnalysisResult, AnalysisType  # noqa: E402
from farm_insights.services import (  # noqa: E402
    AnalysisCache,
    AnalysisError,
    AnalysisService,
    build_system_prompt,
    build_user_prompt,
    normalize_requirements,
)

EXIT_OK = 0
EXIT_ANALYSIS_ERROR = 1
EXIT_INPUT_ERROR = 2


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _print_result(result: AnalysisResult) -> None:
    insights = result.parsed_insights
    print(f"Model: {result.model_used}  tokens: {result.tokens_used.total}\n")
    for title, body in (
        ("Summary", insights.summary),
        ("Key Findings", insights.key_findings),
        ("Recommendations", insights.recommendations),
        ("Risks", insights.risks),
        ("Opportunities", insights.opportunities),
    ):
        print(f"== {title} ==")
        print(body or "(not found in response)")
        print()


async def run_analysis(args: argparse.Namespace, data: dict, requirements: Any) -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    client = OpenRouterClient(
        settings.openrouter, app_name=settings.app_name, app_url=settings.app_url
    )
    service = AnalysisService(
        client,
        AnalysisCache(InMemoryCacheStore(), ttl_seconds=settings.openrouter.cache_ttl),
        default_model=settings.openrouter.default_model,
        cache_enabled=not args.no_cache,
    )
    options = AnalysisOptions(
        model=args.model,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
        cache=not args.no_cache,
    )

    try:
        result = await service.analyze(data, args.type, requirements, options)
    except AnalysisError as exc:
        print(f"[{exc.code}] {exc.message}", file=sys.stderr)
        return EXIT_ANALYSIS_ERROR

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        _print_result(result)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Analyze a JSON file of farm operations data."
    )
    parser.add_argument("data_file", type=Path, help="JSON object with the data.")
    parser.add_argument(
        "--type",
        default=AnalysisType.GENERAL.value,
        choices=[item.value for item in AnalysisType],
        help="Analysis type (default: general).",
    )
    parser.add_argument(
        "--requirements",
        type=Path,
        default=None,
        help="JSON file with partial analysis requirements.",
    )
    parser.add_argument("--model", default=None, help="Override the default model.")
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--max-tokens", dest="max_tokens", type=int, default=None)
    parser.add_argument(
        "--no-cache", dest="no_cache", action="store_true", help="Skip the cache."
    )
    parser.add_argument(
        "--prompt-only",
        dest="prompt_only",
        action="store_true",
        help="Print the assembled prompts without calling the API.",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the full result as JSON."
    )
    args = parser.parse_args(argv)

    try:
        data = _read_json(args.data_file)
        requirements = _read_json(args.requirements) if args.requirements else None
    except (OSError, ValueError) as exc:
        print(f"Could not read input: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    if not isinstance(data, dict):
        print("Data file must contain a JSON object.", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.prompt_only:
        print(build_system_prompt(args.type))
        print("\n" + "=" * 72 + "\n")
        print(build_user_prompt(data, args.type, normalize_requirements(requirements)))
        return EXIT_OK

    return asyncio.run(run_analysis(args, data, requirements))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
