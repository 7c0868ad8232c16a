#!/usr/bin/env python3
"""
Plum Health Profiler – Main Entrypoint
=======================================
Usage:
    python main.py "I'm 42, I smoke and eat candy every day, I never exercise"
    python main.py --image scans/form.png
    python main.py --file cases.json
    python main.py --interactive

Importable convenience function:
    from main import run_profile
    result = run_profile("I'm 35, non-smoker, I run three times a week")
"""

from __future__ import annotations

import argparse
import json
import os

from dotenv import load_dotenv
load_dotenv(override=True)

from core.errors import ProfilerError
from core.logging_utils import setup_logging
from core.router import HealthProfileRouter

# Module-level singleton router (lazy-initialised on first call)
_router: HealthProfileRouter | None = None


def _get_router(config_path: str | None = None) -> HealthProfileRouter:
    global _router
    if _router is None:
        _router = HealthProfileRouter(config_path=config_path)
    return _router


def run_profile(
    text: str | None = None,
    image_path: str | None = None,
    config_path: str | None = None,
) -> dict:
    """
    Run the health profiling pipeline and return the response body.

    Note that the image file is deleted once OCR has read it.
    """
    router = _get_router(config_path)
    return router.profile(text=text, image=image_path)


# ── Presentation helpers ────────────────────────────────────────────────────

def print_result(result: dict, verbose: bool = False):
    """Pretty-print a profiling result to stdout."""
    COLORS = {"High": "\033[91m", "Medium": "\033[93m", "Low": "\033[92m"}
    RESET = "\033[0m"

    print(f"\n{'='*60}")
    print("  PLUM HEALTH PROFILE")
    print(f"{'='*60}")

    if result.get("status") == "incomplete_profile":
        print(f"  Incomplete profile: {result.get('reason', '?')}")
        step1 = result.get("step_1")
        if step1:
            print(f"  Missing fields: {', '.join(step1.get('missing_fields', []))}")
        print(f"{'='*60}\n")
        return

    parsing = result.get("step_1_parsing", {})
    scoring = result.get("step_3_risk_scoring", {})
    final = result.get("step_4_final_output", {})

    level = scoring.get("risk_level", "?")
    color = COLORS.get(level, "")
    print(f"  Risk:     {color}{level}{RESET} (score {scoring.get('score', '?')}/100)")
    print(f"  Answers:  {json.dumps(parsing.get('answers', {}))}")
    if parsing.get("missing_fields"):
        print(f"  Missing:  {', '.join(parsing['missing_fields'])}")
    print(f"{'─'*60}")

    factors = final.get("factors", [])
    if factors:
        print("  CONTRIBUTING FACTORS:")
        for f in factors:
            print(f"     • {f}")

    recs = final.get("recommendations", [])
    if recs:
        print("\n  RECOMMENDATIONS:")
        for r in recs:
            print(f"     • {r}")

    if verbose:
        print("\n  Full result JSON:")
        print(json.dumps(result, indent=2, default=str))

    print(f"\n{'─'*60}")
    print("  Advisory only. This is not a medical diagnosis.")
    print(f"{'='*60}\n")


def run_interactive(router: HealthProfileRouter):
    """Interactive mode – type health descriptions."""
    print("\nPlum Health Profiler – Interactive Mode")
    print("Describe your age, smoking, exercise and diet. Type 'quit' to exit.\n")

    while True:
        try:
            text = input("You > ").strip()
            if text.lower() in ("quit", "exit", "q"):
                break
            if not text:
                continue

            print_result(router.profile(text=text))

        except KeyboardInterrupt:
            break
        except ProfilerError as e:
            print(f"\nError: {e}\n")

    print("\nGoodbye.")


def main():
    parser = argparse.ArgumentParser(description="Plum Health Profiler")
    parser.add_argument("text", nargs="?", help="Free-form health text")
    parser.add_argument("--image", help="Path to an image of a health form (deleted after OCR)")
    parser.add_argument("--file", "-f", help="Path to JSON file of text cases")
    parser.add_argument("--interactive", "-i", action="store_true", help="Interactive mode")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--config", "-c", help="Path to model config YAML")

    args = parser.parse_args()

    setup_logging(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        json_format=os.environ.get("LOG_FORMAT", "text").lower() == "json",
    )

    router = HealthProfileRouter(config_path=args.config)

    if args.interactive:
        run_interactive(router)
    elif args.file:
        with open(args.file) as f:
            data = json.load(f)
        cases = data if isinstance(data, list) else data.get("cases", [data])
        for case in cases:
            text = case.get("text", case.get("input")) if isinstance(case, dict) else case
            print_result(router.profile(text=text), verbose=args.verbose)
    elif args.image or args.text:
        result = router.profile(text=args.text, image=args.image)
        print_result(result, verbose=args.verbose)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
