"""
main.py - Entry point for the scripted opponent decision engine.

Profiles the five archetypes (Guardian, Aggressor, Tactician, Tutorial,
Wildcard) against canned combat scenarios without a running game and
reports how each one responds: attack / block / idle rates, injected
execution errors and a per-archetype button-distribution chart.

Run:  python main.py [--bots guardian wildcard] [--difficulty 7]
                     [--frames 600] [--seed 42] [--plot-dir plots]
"""
VERSION = "1.0.0"

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)

# ── Project imports ───────────────────────────────────────
from bots.profiler import DecisionProfiler
from bots.selector import BotType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Profile scripted fighting-game opponents against canned scenarios.",
    )
    parser.add_argument("--bots", nargs="+", default=[t.value for t in BotType],
                        choices=[t.value for t in BotType],
                        help="archetypes to profile (default: all)")
    parser.add_argument("--difficulty", type=float, default=None,
                        help="difficulty 1-10 (default: each archetype's own)")
    parser.add_argument("--frames", type=int, default=300,
                        help="frames per scenario")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for reproducible runs")
    parser.add_argument("--plot-dir", default=None,
                        help="save button-distribution charts here")
    parser.add_argument("--json", action="store_true",
                        help="print per-scenario results as JSON")
    parser.add_argument("--verbose", action="store_true",
                        help="log every decision")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else logging.INFO)

    profiler = DecisionProfiler(args.bots, difficulty=args.difficulty,
                                frames=args.frames, seed=args.seed)
    results = profiler.run()

    if args.json:
        print(json.dumps([r.as_dict() for r in results], indent=2))

    for stats in profiler.aggregate().values():
        stats.print_summary()
        if args.plot_dir:
            stats.plot_buttons(args.plot_dir)

    logger.info("Profiled %d archetype(s) over %d scenario run(s)",
                len(args.bots), len(results))
    return 0


# ── Run ───────────────────────────────────────────────────
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    sys.exit(main())
