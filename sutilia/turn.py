"""
Play one turn from the command line. Run: python -m sutilia.turn bruma niebla --history faro marea
"""
from __future__ import annotations

import argparse
import asyncio
import json
import random

from .config import Settings
from .evaluator import TurnEvaluator
from .logging_config import configure_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Evaluate one Sutilia turn and print the result as JSON.")
    parser.add_argument("machine_word")
    parser.add_argument("user_word")
    parser.add_argument("--history", nargs="*", default=[], help="earlier words, oldest first")
    parser.add_argument("--seed", type=int, default=None, help="random seed for fallback word picks")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    rng = random.Random(args.seed) if args.seed is not None else None
    evaluator = TurnEvaluator.from_settings(settings, rng=rng)
    result = asyncio.run(evaluator.evaluate_turn(args.machine_word, args.user_word, args.history))
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
