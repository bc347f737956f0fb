#  cli_classify.py
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from mhclassifier.core.config import load_settings
from mhclassifier.domain.keywords import available_profiles
from mhclassifier.domain.models import SensitivityConfig
from mhclassifier.exceptions import KeywordProfileError, TextValidationError
from mhclassifier.services.classification_service import ClassificationService


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Classify a text into mental health categories.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", help="text to classify")
    src.add_argument("--file", type=Path, help="UTF-8 text file to classify")
    ap.add_argument("--offline", action="store_true", help="skip the hosted model, keyword heuristic only")
    ap.add_argument("--profile", default=None, help="keyword profile name (default: KEYWORD_PROFILE or smart)")
    ap.add_argument("--normal", type=float, default=None, help="sensitivity.normal override (0..1)")
    ap.add_argument("--confidence", type=float, default=0.15, help="sensitivity.confidence (0..1)")
    ap.add_argument("--list-profiles", action="store_true", help="print available keyword profiles and exit")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    # --list-profiles works without --text/--file
    if argv is None:
        argv = sys.argv[1:]
    if "--list-profiles" in argv:
        print(json.dumps(available_profiles(), ensure_ascii=False))
        return 0

    args = ap.parse_args(argv)

    settings = load_settings()
    if args.profile:
        settings = replace(settings, keyword_profile=args.profile)
    if args.offline:
        settings = replace(settings, use_model=False)

    text = args.text if args.text is not None else args.file.read_text(encoding="utf-8")

    sensitivity = None
    if args.normal is not None:
        sensitivity = SensitivityConfig(normal=args.normal, confidence=args.confidence)

    try:
        service = ClassificationService(settings)
        outcome = service.classify(text, sensitivity)
    except (TextValidationError, KeywordProfileError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
