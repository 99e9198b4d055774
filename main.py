"""Entry point for Protocol: Reunion, played as text.

Usage:
    python main.py                     # Play from the opening
    python main.py --start-act 2       # Debug: skip ahead
    python main.py --verbose           # Verbose logging
"""

from __future__ import annotations

import logging
import sys

import click

from game.config import load_config
from game.core import InteractIntent, MovementIntent, ReunionGame
from story.dialogue import ChoiceLine

DIRECTIONS = {
    "w": (0, -1),
    "a": (-1, 0),
    "s": (0, 1),
    "d": (1, 0),
}

HELP = (
    "Commands: w/a/s/d [ticks] move | click <id> | next | choose <id> | "
    "state | reset | help | quit"
)


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(asctime)s — %(name)s — %(levelname)s — %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)


def _show_line(game: ReunionGame) -> None:
    line = game.current_dialogue_line()
    if line is None:
        return
    index, total = game.state.dialogue.progress()
    if line.is_narration:
        click.echo(f"  ~ {line.text} ~  ({index}/{total})")
    else:
        mood = f" [{line.emotion}]" if line.emotion else ""
        click.echo(f"  {line.speaker}{mood}: {line.text}  ({index}/{total})")
    if isinstance(line, ChoiceLine):
        for choice in line.choices:
            click.echo(f"    > choose {choice.id}  ({choice.text})")


def _show_state(game: ReunionGame) -> None:
    snap = game.snapshot()
    click.echo(f"  Act {snap['act']} | phase: {snap['phase']}")
    click.echo(f"  Chichi at ({snap['player']['x']}, {snap['player']['y']}) facing {snap['player']['facing']}")
    raised = [name for name, value in snap["flags"].items() if value]
    click.echo(f"  Flags: {', '.join(raised) or '-'}")
    items = [f"{name}={'yes' if value else 'no'}" for name, value in snap["collectibles"].items()]
    click.echo(f"  Items: {', '.join(items)}")


def run_command(game: ReunionGame, command: str) -> bool:
    """Apply one typed command. Returns False when the player quits."""
    parts = command.strip().split()
    if not parts:
        parts = ["next"]
    verb, args = parts[0].lower(), parts[1:]

    if verb in ("quit", "exit", "q"):
        return False
    if verb == "help":
        click.echo(HELP)
    elif verb in DIRECTIONS:
        ticks = int(args[0]) if args and args[0].isdigit() else 1
        ux, uy = DIRECTIONS[verb]
        for _ in range(ticks):
            game.queue_input(MovementIntent(ux * game.move_speed, uy * game.move_speed))
            game.tick()
            if game.is_dialogue_active():
                break
    elif verb == "click" and args:
        game.queue_input(InteractIntent(args[0]))
        game.tick()
    elif verb == "next":
        game.advance_dialogue()
    elif verb == "choose" and args:
        if not game.choose_dialogue_option(args[0]):
            click.echo("  That is not a choice right now.")
    elif verb == "state":
        _show_state(game)
    elif verb == "reset":
        game.reset_game()
        game.start_game()
    else:
        click.echo(HELP)

    _show_line(game)
    return True


@click.command()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
@click.option("--start-act", type=click.IntRange(1, 3), default=None, help="Debug: skip to an act")
def main(verbose: bool, config_dir: str | None, start_act: int | None) -> None:
    """Protocol: Reunion — a love letter in pixels, in your terminal."""

    cfg = load_config(config_dir)

    log_file = cfg.get("_env", {}).get("log_file") or cfg.get("storage", {}).get("log_file")
    _setup_logging(verbose=verbose, log_file=log_file)

    game = ReunionGame(config=cfg)
    if start_act is not None:
        game.skip_to_act(start_act)
    game.start_game()

    click.echo(f"Protocol: Reunion — Act {game.current_act()}: {game.state.acts.title}")
    click.echo(HELP)
    _show_line(game)

    act = game.current_act()
    while True:
        try:
            command = click.prompt("", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            break
        if not run_command(game, command):
            break
        if game.current_act() != act:
            act = game.current_act()
            click.echo(f"\n  Act {act}: {game.state.acts.title}\n")

    click.echo("\nSee you soon, Chichi. 💕")


if __name__ == "__main__":
    main()
