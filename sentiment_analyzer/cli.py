"""
Command-line front end for the sentiment analyzer.

Usage:
    sentiment-analyzer analyze "I love this!" --save
    sentiment-analyzer batch reviews.txt
    sentiment-analyzer history
    sentiment-analyzer summary
    sentiment-analyzer export --output history.csv
    sentiment-analyzer clear --yes
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .api import SentimentAnalyzerAPI
from .config import settings
from .main import configure_logging, create_api


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sentiment-analyzer",
        description="Classify text sentiment and keep a bounded analysis history",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze one text")
    analyze.add_argument("text", help="Text to analyze")
    analyze.add_argument("--save", action="store_true", help="Commit the result to history")

    batch = subparsers.add_parser("batch", help="Analyze every non-blank line of a file")
    batch.add_argument("path", help="Input file, or '-' for stdin")
    batch.add_argument("--no-save", action="store_true", help="Do not commit results to history")

    subparsers.add_parser("history", help="Print the saved history")
    subparsers.add_parser("summary", help="Print counts per sentiment over the history")

    export = subparsers.add_parser("export", help="Export the history as CSV")
    export.add_argument("--output", help="Destination path (defaults to the dated file name)")

    clear = subparsers.add_parser("clear", help="Delete the whole history")
    clear.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    return parser


def _read_blob(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _emit(response: dict) -> int:
    if response.get("warning"):
        print(f"warning: {response['warning']}", file=sys.stderr)
    if not response["success"]:
        print(f"error: {response['error']}", file=sys.stderr)
        return 1
    print(json.dumps(response["data"], indent=2, ensure_ascii=False))
    return 0


def run(args: argparse.Namespace, api: SentimentAnalyzerAPI) -> int:
    if args.command == "analyze":
        return _emit(api.save(args.text) if args.save else api.preview(args.text))

    if args.command == "batch":
        try:
            blob = _read_blob(args.path)
        except OSError as e:
            print(f"error: cannot read {args.path}: {e}", file=sys.stderr)
            return 1
        return _emit(api.analyze_batch(blob, commit=not args.no_save))

    if args.command == "history":
        return _emit(api.load_history())

    if args.command == "summary":
        return _emit(api.summarize_history())

    if args.command == "export":
        response = api.export_csv()
        if not response["success"]:
            return _emit(response)
        artifact = response["data"]
        destination = Path(args.output or artifact["filename"])
        destination.write_text(artifact["content"], encoding="utf-8")
        print(f"Exported {artifact['record_count']} record(s) to {destination}")
        return 0

    if args.command == "clear":
        if not args.yes:
            answer = input("Are you sure you want to clear all history? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Aborted")
                return 1
        return _emit(api.clear_history())

    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    configure_logging(settings)
    return run(args, create_api(settings))


if __name__ == "__main__":
    sys.exit(main())
