#!/usr/bin/env python3
"""
Pedigree conversion script

Converts a pedigree JSON file into patient records and prints them
as JSON. Disorders are resolved against an OMIM terms file when one is
given, otherwise against the configured vocabulary.

Usage:
    python scripts/convert_pedigree.py pedigree.json [--omim-terms omim.json]
"""
import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path to import pedigree_processor modules
sys.path.append(str(Path(__file__).parent.parent))

from pedigree_processor.config import settings
from pedigree_processor.logging_config import configure_logging
from pedigree_processor.pedigree import Pedigree, PedigreeConverter
from pedigree_processor.vocabulary import InMemoryVocabulary, VocabularyFactory


def convert_file(pedigree_path: Path, omim_terms: str = "") -> int:
    """Convert one pedigree file; returns the process exit code"""
    if not pedigree_path.exists():
        print(f"⚠️  Pedigree file not found: {pedigree_path}", file=sys.stderr)
        return 1

    pedigree = Pedigree.from_json(pedigree_path.read_text(encoding="utf-8"))

    if omim_terms:
        omim = InMemoryVocabulary.from_file("omim", omim_terms)
    else:
        omim = VocabularyFactory.from_settings("omim")

    converter = PedigreeConverter(omim=omim, expected_version=settings.expected_pedigree_version)
    result = converter.convert_with_report(pedigree)

    print(json.dumps(result.records, indent=2))
    print(f"\n✅ Converted {result.count} individuals ({len(result.errors)} field errors)", file=sys.stderr)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Convert a pedigree JSON file to patient records")
    parser.add_argument("pedigree", type=Path, help="Path to the pedigree JSON file")
    parser.add_argument("--omim-terms", default="", help="JSON file with OMIM terms")
    args = parser.parse_args()

    configure_logging(settings.log_level)
    try:
        sys.exit(convert_file(args.pedigree, args.omim_terms))
    except Exception as e:
        print(f"\n❌ Error converting pedigree: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
