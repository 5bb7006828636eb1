import argparse
import logging
import pathlib
import sys

from .api import get_skill_details, get_user_data, process_batch, setup_tables
from .levels import exp_to_next_level, level_for_exp
from .notify import make_notifier
from .settings import Settings


def make_parser(**kwargs):
    parser = argparse.ArgumentParser(**kwargs)
    config_group = parser.add_mutually_exclusive_group()
    config_group.add_argument("--settings", type=pathlib.Path)
    config_group.add_argument("--db", type=pathlib.Path)
    return parser


def load_settings(args) -> Settings:
    if args.settings is not None:
        settings = Settings.load(args.settings)
    else:
        settings = Settings.defaults()
    if args.db is not None:
        settings.db_path = args.db.expanduser()
    logging.basicConfig(level=settings.log_level.value)
    return settings


setup_parser = make_parser(description="Create the skills database.")


def setup_cli():
    settings = load_settings(setup_parser.parse_args())
    if not setup_tables(str(settings.db_path)):
        sys.exit(1)


process_parser = make_parser(description="Award experience for a batch of recorded keystrokes.")
process_parser.add_argument("keystrokes", type=pathlib.Path, nargs="?", help="file of recorded keystrokes; stdin if omitted")


def process_cli():
    args = process_parser.parse_args()
    settings = load_settings(args)
    if args.keystrokes is None:
        keystrokes = sys.stdin.read()
    else:
        keystrokes = args.keystrokes.read_text()
    # trailing newline from the file, not a keystroke
    keystrokes = keystrokes.rstrip("\n")
    if not process_batch(keystrokes, str(settings.db_path), make_notifier(settings.notify_command)):
        sys.exit(1)


show_parser = make_parser(description="Show skill levels.")
show_parser.add_argument("skill", nargs="?", help="show details for a single skill")


def format_skill_line(name: str, level: int, total_exp: int) -> str:
    return f"{name:<22} {level:>2}  {total_exp:>10,} xp"


def show_cli():
    args = show_parser.parse_args()
    settings = load_settings(args)
    if args.skill is None:
        rows = get_user_data(str(settings.db_path))
        if not rows:
            sys.exit(1)
        for row in rows:
            print(format_skill_line(row.name, row.level, row.total_exp))
        return

    skill = get_skill_details(args.skill, str(settings.db_path))
    if skill is None:
        print(f"No skill named {args.skill}", file=sys.stderr)
        sys.exit(1)
    print(format_skill_line(skill.name, skill.level, skill.total_exp))
    remaining = exp_to_next_level(skill.total_exp)
    if remaining is not None:
        print(f"{remaining:,} xp to level {level_for_exp(skill.total_exp) + 1}")
