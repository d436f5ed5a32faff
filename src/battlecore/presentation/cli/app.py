"""Command-line battle simulator."""
from __future__ import annotations

import argparse
import logging
from typing import List, Sequence

from battlecore.core.rng import RNG
from battlecore.data.content_loader import load_content
from battlecore.data.errors import DataError
from battlecore.domain.battle_models import BattleState
from battlecore.domain.entities import Actor
from battlecore.services import BattleService, BattleSetupError
from battlecore.services.controllers.battle_controller import DEFAULT_MAX_ROUNDS, BattleController
from battlecore.services.factories import make_instance_id

from .render import debug_enabled, render_log, render_roster

logger = logging.getLogger(__name__)

_MAX_RANDOM_SEED = 2**31 - 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="battlecore-sim",
        description="Run automatic, seeded battles from JSON definitions.",
    )
    parser.add_argument("--class", dest="classes", action="append", metavar="CLASS_ID",
                        help="Party member class (repeatable, default: knight)")
    parser.add_argument("--enemy", dest="enemies", action="append", metavar="ENEMY_ID",
                        help="Enemy to fight (repeatable, default: slime)")
    parser.add_argument("--level", type=int, default=1, help="Level for every actor")
    parser.add_argument("--seed", type=int, default=0, help="Battle seed (master seed with --battles)")
    parser.add_argument("--battles", type=int, default=1, help="Number of battles to simulate")
    parser.add_argument("--max-rounds", type=int, default=DEFAULT_MAX_ROUNDS, help="Round limit per battle")
    parser.add_argument("--definitions", help="Directory holding the definition JSON files")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the requested battles and return an exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or debug_enabled() else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.battles < 1:
        print("--battles must be at least 1.")
        return 2

    try:
        content = load_content(args.definitions)
    except DataError as exc:
        print(f"Could not load definitions: {exc}")
        return 1

    service = BattleService(content)
    controller = BattleController(service)
    class_ids = args.classes or ["knight"]
    enemy_ids = args.enemies or ["slime"]

    if args.battles == 1:
        seeds = [args.seed]
    else:
        master = RNG(args.seed)
        seeds = [master.randint(0, _MAX_RANDOM_SEED) for _ in range(args.battles)]

    wins = 0
    for index, seed in enumerate(seeds, start=1):
        try:
            state = _start(service, class_ids, enemy_ids, args.level, seed)
        except BattleSetupError as exc:
            print(f"Could not start battle: {exc}")
            return 1
        end = controller.run_auto_battle(state, args.max_rounds)
        outcome = end.reason if end is not None else "timeout"
        if outcome == "victory":
            wins += 1
        if args.battles == 1:
            _print_battle(state)
        else:
            print(f"Battle {index} (seed {seed}): {outcome} after {state.turn} turns")

    if args.battles > 1:
        print(f"Won {wins}/{args.battles} battles.")
    return 0


def _start(
    service: BattleService,
    class_ids: Sequence[str],
    enemy_ids: Sequence[str],
    level: int,
    seed: int,
) -> BattleState:
    party: List[Actor] = []
    taken: List[str] = []
    for class_id in class_ids:
        actor_id = make_instance_id(class_id, taken)
        class_def = service.content.classes.get(class_id)
        name = class_def.name if class_def is not None else class_id
        if actor_id != class_id:
            name = f"{name} {actor_id.rsplit('_', 1)[-1]}"
        party.append(service.create_player(class_id, name, actor_id=actor_id, level=level))
        taken.append(actor_id)
    return service.start_battle(party, enemy_ids, level=level, seed=seed)


def _print_battle(state: BattleState) -> None:
    for line in render_log(state.log):
        print(line)
    print()
    for line in render_roster(state):
        print(line)
    if state.ended is None:
        print("The battle did not finish within the round limit.")
