"""
CLI interface for paperlens
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import Settings
from .models import ExtractionMode
from .toolkit import ResearchToolkit


MODE_CHOICES = [mode.value for mode in ExtractionMode] + ["self-cite"]


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser"""
    parser = argparse.ArgumentParser(
        description="Extract TL;DR, methods, recommendations, references and citations from research papers"
    )

    parser.add_argument(
        "mode",
        choices=MODE_CHOICES,
        help="Tool to run"
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--abstract",
        default="",
        help="Inline abstract or text"
    )
    source.add_argument(
        "--text-file",
        help="Read inline text from a file"
    )

    parser.add_argument(
        "--file", "-f",
        help="Stored paper path (PDF or text), resolved under --root"
    )

    parser.add_argument(
        "--root",
        help="Document root directory (defaults to PAPERLENS_UPLOAD_ROOT or '.')"
    )

    parser.add_argument("--title", default="", help="Paper title for citations")
    parser.add_argument("--author", default="", help="Author string for citations")
    parser.add_argument("--year", default="", help="Publication year for citations")

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full JSON result"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings()
    if args.root:
        settings.upload_root = args.root

    payload = {
        "mode": args.mode,
        "abstract": args.abstract,
        "filePath": args.file,
        "meta": {"title": args.title, "author": args.author, "year": args.year},
    }

    toolkit = ResearchToolkit(settings=settings)
    try:
        if args.text_file:
            payload["abstract"] = Path(args.text_file).read_text(encoding="utf-8")
        result = toolkit.run_payload(payload)
    except (OSError, ValueError, ValidationError) as exc:
        if args.verbose:
            raise
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        toolkit.close()

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(result.text)


if __name__ == "__main__":
    main()
