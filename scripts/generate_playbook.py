#!/usr/bin/env python3
"""
Generate a playbook from the catalog and print it.

Scores every concept against the chosen formations, allocates a balanced
set of plays and prints them best first. With --output the selected plays
are materialized into play documents and written as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from playbook_engine.core.ids import SequentialIdFactory
from playbook_engine.core.models import GeneratorConfig, PlaybookOptions
from playbook_engine.core.registry import load_catalog
from playbook_engine.core.validation import validate_play_document
from playbook_engine.playbook.analyzer import analyze_formation
from playbook_engine.playbook.document import build_play_documents
from playbook_engine.playbook.planner import PlaybookGenerator, get_generated_plays_stats

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("generate_playbook")


def list_formations():
    """Print the catalog formations and their derived context."""
    catalog = load_catalog()
    print(f"{'Key':<22} {'Name':<24} {'Personnel':>9} {'Structure':>10} {'Strength':>9}")
    print("-" * 78)
    for formation in catalog.formations.list():
        context = analyze_formation(formation)
        print(f"{formation.id:<22} {formation.name:<24} {context.personnel:>9} "
              f"{context.structure.value:>10} {context.strength_side.value:>9}")


def generate_playbook(formations, count, ratio, allow_reuse=False, seed_ids=False, output_file=None):
    """Generate, print and optionally save a playbook."""
    catalog = load_catalog()
    options = PlaybookOptions(formations=formations, target_play_count=count, pass_run_ratio=ratio)
    config = GeneratorConfig(allow_concept_reuse=allow_reuse)
    ids = SequentialIdFactory() if seed_ids else None

    generator = PlaybookGenerator(
        formations=catalog.formations.as_dict(),
        concepts=catalog.concepts.list(),
        config=config,
        id_factory=ids,
    )
    plays = generator.generate(options)
    stats = get_generated_plays_stats(plays)

    print("\n" + "=" * 90)
    print(f"PLAYBOOK: {', '.join(formations)}")
    print("=" * 90)
    print(f"{'#':<4} {'Play':<44} {'Type':<6} {'Score':>6}  Rationale")
    print("-" * 90)
    for i, play in enumerate(plays, 1):
        rationale = "; ".join(play.rationale) or "-"
        print(f"{i:<4} {play.name:<44} {play.concept.concept_type.value:<6} {play.score:>6}  {rationale}")

    print()
    print(f"Plays: {stats.total} of {count} requested "
          f"({stats.pass_plays} pass / {stats.run_plays} run, {stats.pass_run_ratio:.0%} pass)")
    for key, n in stats.formation_counts.items():
        print(f"  {key}: {n}")

    if len(plays) < count:
        print(f"\nNote: catalog ran out of viable concepts ({count - len(plays)} short)")

    if output_file:
        documents = build_play_documents(plays, catalog.formations.as_dict(), ids)
        for document in documents:
            validate_play_document(document)

        output_path = Path(output_file)
        with open(output_path, 'w') as f:
            json.dump([d.model_dump(mode="json") for d in documents], f, indent=2)
        print(f"\n{len(documents)} play documents saved to: {output_path}")

    return plays


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate a playbook for a set of formations")
    parser.add_argument("--formations", "-f", nargs="+", default=["shotgun", "i_formation"],
                        help="Formation keys (default: shotgun i_formation)")
    parser.add_argument("--count", "-n", type=int, default=30,
                        help="Target number of plays (default: 30)")
    parser.add_argument("--ratio", "-r", type=float, default=0.5,
                        help="Fraction of pass plays, 0-1 (default: 0.5)")
    parser.add_argument("--allow-reuse", action="store_true",
                        help="Allow a concept once per formation instead of once per playbook")
    parser.add_argument("--deterministic-ids", action="store_true",
                        help="Use sequential ids instead of random ones")
    parser.add_argument("--output", "-o", type=str, default=None,
                        help="Write materialized play documents to this JSON file")
    parser.add_argument("--list", action="store_true", help="List catalog formations and exit")
    args = parser.parse_args()

    if args.list:
        list_formations()
    else:
        generate_playbook(
            formations=args.formations,
            count=args.count,
            ratio=args.ratio,
            allow_reuse=args.allow_reuse,
            seed_ids=args.deterministic_ids,
            output_file=args.output,
        )
