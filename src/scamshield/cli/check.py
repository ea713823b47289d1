"""Check a message, phone number, or URL from the command line.

Usage:
    scamshield-check "+1 (415) 555-0142" [--validate-phone] [--summary]

Reads the input from stdin when no positional argument is given. Uses the
repository backend configured in settings.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

from scamshield.analysis.engine import AnalysisResult, AnalysisSession
from scamshield.services.factories import build_analyzer


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Check an input against ScamShield community reports")
    p.add_argument("content", nargs="?", help="Message, phone number, or URL (default: read stdin)")
    p.add_argument("--validate-phone", action="store_true", help="Require a 10-15 digit phone number")
    p.add_argument("--summary", action="store_true", help="Print a short human-readable summary instead of JSON")
    return p.parse_args(argv)


def format_result(result: AnalysisResult) -> str:
    lines = [
        f"Input:   {result.input} ({result.classification.value})",
        f"Risk:    {result.risk_level.value.upper()} (score {result.score})",
        f"Verdict: {result.message}",
    ]
    if result.matched_keywords:
        lines.append(f"Keywords: {', '.join(result.matched_keywords)} (score {result.keyword_score})")
    for report in result.approved_reports:
        lines.append(f"  - [{report.risk_level.value}] {report.title} (reported {report.report_count}x)")
    if result.recommended_actions:
        lines.append("What to do:")
        lines.extend(f"  * {action}" for action in result.recommended_actions)
    return "\n".join(lines)


async def _run(content: str, validate_phone: bool) -> tuple[AnalysisResult | None, str | None]:
    session = AnalysisSession(build_analyzer())
    state = await session.submit(content, validate_phone=validate_phone)
    return state.result, state.error


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    content = args.content if args.content is not None else sys.stdin.read()

    result, error = asyncio.run(_run(content, args.validate_phone))
    if error:
        print(error, file=sys.stderr)
        return 2
    if args.summary:
        print(format_result(result))
    else:
        print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
