"""
Command-line runner for scripted fragword sessions.

Usage:
    fragword script.yaml
    python -m fragword.main script.yaml --verbose

A script holds a level descriptor and the moves to play on it:

    level:
      rows: 3
      cols: 3
      goal: {r: 1, c: 2}
      seeds: [{text: CA, r: 1, c: 0}]
      deck: [T, S]
      allowed_words: [ca, cat, cats]
    moves:
      - {action: place, tile: T, r: 1, c: 1}
      - {action: submit}
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from .engine import Level, Move, Session
from .verifiers import filter_cascading_issues


class Script(BaseModel):
    """A level plus the moves to apply to it."""
    level: Level
    moves: List[Move] = Field(default_factory=list)


def load_script(script_path: str) -> Script:
    """Load a session script from a YAML file."""
    path = Path(script_path)

    if not path.exists():
        raise FileNotFoundError(f"Script file not found: {script_path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return Script(**(data or {}))


def describe(move: Move) -> str:
    parts = [move.action]
    if move.tile:
        parts.append(move.tile)
    if move.r is not None and move.c is not None:
        parts.append(f"@ ({move.r}, {move.c})")
    if move.action == "return":
        parts.append(f"-> {move.pool}")
    return " ".join(parts)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Play a scripted fragword session",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Move actions:
  place          tile, r, c     stage a tile from hand or reserve
  move           tile, r, c     move a tile staged this turn
  return         r, c, pool     return a staged tile (pool: hand)
  recall         tile           stage a recall of a committed tile
  cancel_recall  tile           undo a staged recall
  submit                        commit the turn
  reset                         roll back everything staged
        """
    )
    parser.add_argument(
        "script",
        help="Path to YAML script file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print the final summary"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        script = load_script(args.script)
    except Exception as e:
        print(f"Error loading script: {e}", file=sys.stderr)
        return 1

    session = Session.create(script.level)

    if not args.quiet:
        print(session.state.render())
        print(f"Hand: {' '.join(session.hand) or '-'}")
        print()

    for i, move in enumerate(script.moves, start=1):
        result = session.apply(move)
        if args.quiet:
            continue
        status = "ok" if result.ok else f"rejected: {result.reason}"
        print(f"[{i}] turn {session.history[-1].turn}: {describe(move)} -> {status}")
        if result.code == "BOARD_INVALID":
            for issue in filter_cascading_issues(session.state.report().issues):
                print(f"    - {issue.message}")
        if move.action in ("submit", "reset") or not result.ok:
            print(session.state.render())
            print(f"Hand: {' '.join(session.hand) or '-'}  Reserve: {' '.join(session.reserve) or '-'}")
            print()

    state = session.get_state()
    print()
    print("=== Session Summary ===")
    print(f"Level: {script.level.name or script.level.id or 'untitled'}")
    print(f"Turns used: {state['used_turns']} (par {state['par']})")
    print(f"Won: {'yes' if state['won'] else 'no'}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
