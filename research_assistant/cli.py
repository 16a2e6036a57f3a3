#!/usr/bin/env python3
"""
Command-line front end for the research assistant.

Usage:
    research-assistant ttest --group1 "2.9, 3.0, 3.1" --group2 "3.2, 3.5, 3.8"
    research-assistant chisq 10 20 15 5
    research-assistant sample-size --sensitivity 90 --margin 5 --prevalence 50
    research-assistant extract --schema hypothesis < reply.txt
    research-assistant suggest hypothesis --title "..." --questions "..."
    research-assistant search "biomarkers for neonatal sepsis"
    research-assistant review --persona Biostatistician draft.txt
    research-assistant project export-csv my_project
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from research_assistant.agents import AIPersona, ResearchAssistant
from research_assistant.biostats.metrics import (
    chi_square_two_by_two,
    format_chi_square,
    format_t_test,
    parse_counts,
    parse_sample_vector,
    unpaired_t_test,
)
from research_assistant.biostats.sample_size import SampleSizeInputs, estimate_sample_size
from research_assistant.config import Settings
from research_assistant.core.store import ProjectStore
from research_assistant.errors import ResearchAssistantError
from research_assistant.llm.extraction import extract_json, extract_structure
from research_assistant.llm.schemas import (
    HypothesisSuggestion,
    LiteratureInsights,
    ProjectDetails,
    StudyDesignSuggestion,
    TitleAbstractSuggestion,
)

logger = logging.getLogger(__name__)

SCHEMAS = {
    "details": ProjectDetails,
    "hypothesis": HypothesisSuggestion,
    "design": StudyDesignSuggestion,
    "title": TitleAbstractSuggestion,
    "literature": LiteratureInsights,
}


def _read_input(path: Optional[str]) -> str:
    if path and path != "-":
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    return sys.stdin.read()


def _print_outcome(outcome) -> int:
    if not outcome.ok:
        print(outcome.error, file=sys.stderr)
        return 1
    value = outcome.value
    if hasattr(value, "found"):
        if not value.found:
            print("No suggestion could be extracted from the response.", file=sys.stderr)
            return 1
        value = value.value
    if hasattr(value, "to_dict"):
        print(json.dumps(value.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(value)
    return 0


def _assistant(settings: Settings) -> ResearchAssistant:
    from research_assistant.llm.factory import get_client
    return ResearchAssistant(get_client(settings=settings), max_workers=settings.max_workers)


def cmd_ttest(args, settings: Settings) -> int:
    group1 = parse_sample_vector(args.group1)
    group2 = parse_sample_vector(args.group2)
    result = unpaired_t_test(group1, group2)
    print(format_t_test(result))
    if args.interpret:
        with _assistant(settings) as assistant:
            return _print_outcome(assistant.interpret_t_test(args.group1, args.group2, result).result())
    return 0


def cmd_chisq(args, settings: Settings) -> int:
    table = parse_counts(args.counts)
    result = chi_square_two_by_two(table)
    print(format_chi_square(result))
    if result is None:
        return 1
    if args.interpret:
        with _assistant(settings) as assistant:
            return _print_outcome(assistant.interpret_chi_square(table, result).result())
    return 0


def cmd_sample_size(args, settings: Settings) -> int:
    size = estimate_sample_size(SampleSizeInputs(args.sensitivity, args.margin, args.prevalence))
    print(f"Required Sample Size: {size}")
    print("This is an estimate. Consult a biostatistician for complex study designs.")
    return 0


def cmd_extract(args, settings: Settings) -> int:
    text = _read_input(args.file)
    if args.schema:
        extraction = extract_structure(text, SCHEMAS[args.schema])
        value = extraction.value.to_dict() if extraction.found else None
    else:
        extraction = extract_json(text)
        value = extraction.value
    if not extraction.found:
        print(f"Not found: {extraction.error}", file=sys.stderr)
        return 1
    print(json.dumps({"strategy": extraction.strategy, "value": value}, indent=2, ensure_ascii=False))
    return 0


def cmd_suggest(args, settings: Settings) -> int:
    with _assistant(settings) as assistant:
        if args.kind == "details":
            future = assistant.project_details_from_title(args.title)
        elif args.kind == "hypothesis":
            future = assistant.suggest_hypothesis(args.title, args.questions)
        else:
            future = assistant.suggest_study_design(args.title, args.questions)
        return _print_outcome(future.result())


def cmd_search(args, settings: Settings) -> int:
    with _assistant(settings) as assistant:
        outcome = assistant.search_literature(args.query).result()
    if not outcome.ok:
        print(outcome.error, file=sys.stderr)
        return 1
    result = outcome.value
    print(result.summary)
    if result.sources:
        print("\nSources:")
        for i, source in enumerate(result.sources, 1):
            print(f"  {i}. {source.title or 'Untitled Source'} - {source.uri}")
    if result.key_themes:
        print("\nKey themes:")
        for theme in result.key_themes:
            print(f"  - {theme}")
    if result.related_queries:
        print("\nRelated searches:")
        for query in result.related_queries:
            print(f"  - {query}")
    return 0


def cmd_review(args, settings: Settings) -> int:
    draft = _read_input(args.file)
    with _assistant(settings) as assistant:
        return _print_outcome(assistant.review_draft(draft, AIPersona(args.persona)).result())


def cmd_project(args, settings: Settings) -> int:
    store = ProjectStore(args.store_dir or settings.store_dir)
    if args.action == "list":
        for name in store.list_projects():
            print(name)
        return 0
    if not args.name:
        print("A project name is required.", file=sys.stderr)
        return 2
    if args.action == "show":
        print(json.dumps(store.load(args.name).to_dict(), indent=2, ensure_ascii=False))
    elif args.action == "export-csv":
        sys.stdout.write(store.load(args.name).data.to_csv())
    elif args.action == "bibliography":
        print(store.load(args.name).bibliography())
    elif args.action == "reset":
        removed = store.delete(args.name)
        print(f"Reset {args.name}" if removed else f"Nothing stored for {args.name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="research-assistant", description="Research assistant toolkit")
    parser.add_argument("--log-level", default=None, help="Logging level (default: RA_LOG_LEVEL or WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("ttest", help="Unpaired t-test on two comma-separated groups")
    p.add_argument("--group1", required=True)
    p.add_argument("--group2", required=True)
    p.add_argument("--interpret", action="store_true", help="Ask the model to interpret the result")
    p.set_defaults(func=cmd_ttest)

    p = sub.add_parser("chisq", help="Chi-square test for a 2x2 table (a b c d)")
    p.add_argument("counts", nargs=4, metavar="COUNT")
    p.add_argument("--interpret", action="store_true", help="Ask the model to interpret the result")
    p.set_defaults(func=cmd_chisq)

    p = sub.add_parser("sample-size", help="Sample size for a diagnostic-accuracy study")
    p.add_argument("--sensitivity", type=float, default=90.0, help="Expected sensitivity (%%)")
    p.add_argument("--margin", type=float, default=5.0, help="Margin of error (%%)")
    p.add_argument("--prevalence", type=float, default=50.0, help="Disease prevalence (%%)")
    p.set_defaults(func=cmd_sample_size)

    p = sub.add_parser("extract", help="Recover JSON from a model reply (file or stdin)")
    p.add_argument("file", nargs="?", default="-")
    p.add_argument("--schema", choices=sorted(SCHEMAS))
    p.set_defaults(func=cmd_extract)

    p = sub.add_parser("suggest", help="AI suggestions for the project overview")
    p.add_argument("kind", choices=["details", "hypothesis", "design"])
    p.add_argument("--title", required=True)
    p.add_argument("--questions", default="")
    p.set_defaults(func=cmd_suggest)

    p = sub.add_parser("search", help="Grounded literature search")
    p.add_argument("query")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("review", help="Review a draft with an AI persona")
    p.add_argument("file", nargs="?", default="-")
    p.add_argument("--persona", choices=[persona.value for persona in AIPersona], default=AIPersona.SUBJECT_GUIDE.value)
    p.set_defaults(func=cmd_review)

    p = sub.add_parser("project", help="Inspect saved projects")
    p.add_argument("action", choices=["list", "show", "export-csv", "bibliography", "reset"])
    p.add_argument("name", nargs="?")
    p.add_argument("--store-dir", default=None, help="Store root (default: RA_STORE_DIR)")
    p.set_defaults(func=cmd_project)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args, settings)
    except (ResearchAssistantError, ValueError, OSError) as e:
        # ValueError covers configuration problems such as a missing API key; OSError unreadable input files
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
