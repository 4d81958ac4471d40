#!/usr/bin/env python3
"""
Score a Saved Questionnaire

Scores a questionnaire exported as JSON (the same shape POST /api/audits
accepts) and prints the category scores plus the template report. No AI, no
database.

Usage:
    python scripts/score_audit.py answers.json
    python scripts/score_audit.py answers.json --language bg
    python scripts/score_audit.py answers.json --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from bizaudit.errors import ValidationError
from bizaudit.models import AuditSubmission
from bizaudit.reporter import generate_template_report
from bizaudit.scoring.engine import compute_scores, find_unmapped_answers, score_label

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_report(submission: AuditSubmission, as_json: bool) -> None:
    scores = compute_scores(submission)
    report = generate_template_report(scores, submission)

    if as_json:
        print(json.dumps({"scores": scores.to_dict(), "report": report.to_dict()}, indent=2, ensure_ascii=False))
        return

    print(f"\n{'='*70}")
    print(f"{submission.business_name or 'Unnamed business'} ({submission.niche.label})")
    print(f"{'='*70}")
    for category in scores.categories:
        print(f"  {category.label:<32} {category.score:>3}/100  weight {category.weight}%  {score_label(category.score)}")
    print(f"  {'OVERALL':<32} {scores.overall:>3}/100  {score_label(scores.overall)}")

    unmapped = find_unmapped_answers(submission)
    if unmapped:
        print(f"\n⚠ {len(unmapped)} answer(s) not in the catalog, scored as partial:")
        for item in unmapped:
            print(f"  - {item['step']}.{item['field']}: {item['value']!r}")

    print(f"\n{report.executive_summary}\n")
    for heading, items in (
        ("GAPS", report.gaps),
        ("QUICK WINS", report.quick_wins),
        ("STRATEGIC RECOMMENDATIONS", report.strategic_recommendations),
    ):
        print(heading)
        for item in items:
            print(f"  [{item.priority}] {item.title}")
            print(f"      {item.description}")
        print()


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Score a saved questionnaire")
    parser.add_argument("file", help="Questionnaire JSON file")
    parser.add_argument("--language", choices=["en", "bg"], help="Report language (defaults to the file's)")
    parser.add_argument("--json", action="store_true", help="Print scores and report as JSON")
    args = parser.parse_args()

    data = json.loads(Path(args.file).read_text(encoding="utf-8"))
    try:
        submission = AuditSubmission.from_form_state(data, language=args.language)
    except ValidationError as e:
        print("ERROR: Questionnaire is incomplete:")
        for error in e.errors:
            print(f"  - {error['field']}: {error['message']}")
        return 1

    print_report(submission, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
