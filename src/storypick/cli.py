"""storypick CLI interface."""

import argparse
import sys
from pathlib import Path

from . import __version__
from .hooks import HookError, ensure_gitignored, install_hook
from .logging_setup import setup_logging
from .models import Category, Chosen, ConfigError
from .pipeline import run_pick
from .store import ConfigStore, StoryFile, WriteError
from .ui import ProgressIndicator, SelectionError, TerminalSelector


def get_stores(root: Path | None = None) -> tuple[ConfigStore, StoryFile]:
    """Get stores rooted at the working directory."""
    if root is None:
        root = Path.cwd()
    return ConfigStore(root), StoryFile(root)


def cmd_init(args: argparse.Namespace) -> int:
    """Create .storypick/config.json and ignore local state in git."""
    config_store, _ = get_stores()

    if config_store.initialize():
        print(f"Created {config_store.config_file}")
        print("Edit it to describe your sources, then run 'storypick pick'.")
    else:
        print(f"{config_store.config_file} already exists.")

    added = ensure_gitignored(config_store.root)
    if added:
        print(f"Added to .gitignore: {', '.join(added)}")
    return 0


def cmd_pick(args: argparse.Namespace) -> int:
    """Fetch stories from all sources and pick one."""
    config_store, story_file = get_stores()

    try:
        config = config_store.load()
        category = (
            Category.parse(args.category) if args.category else config.default_category
        )
    except (FileNotFoundError, ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.sources:
        print(
            f"Error: no sources configured in {config_store.config_file}",
            file=sys.stderr,
        )
        return 1

    indicator = None
    if not args.no_spinner and sys.stderr.isatty():
        indicator = ProgressIndicator(f"Fetching {category.label} stories")

    try:
        result = run_pick(
            config,
            category,
            selector=TerminalSelector(),
            story_file=story_file,
            indicator=indicator,
            timeout=args.timeout,
        )
    except (SelectionError, WriteError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if isinstance(result, Chosen):
        print(f"Selected {result.key}")
    else:
        print("No story selected.")
    return 0


def cmd_current(args: argparse.Namespace) -> int:
    """Print the selected story key."""
    _, story_file = get_stores()

    key = story_file.read()
    if key is None:
        print("No story selected.", file=sys.stderr)
        return 1

    print(key)
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    """Forget the selected story."""
    _, story_file = get_stores()

    if story_file.clear():
        print("Cleared the selected story.")
    else:
        print("No story selected.")
    return 0


def cmd_hook_install(args: argparse.Namespace) -> int:
    """Install the prepare-commit-msg hook."""
    try:
        hook_path = install_hook(Path.cwd(), force=args.force)
    except (HookError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Installed {hook_path}")
    return 0


def cmd_hook(args: argparse.Namespace) -> int:
    """Handle hook subcommand dispatch."""
    if args.hook_command == "install":
        return cmd_hook_install(args)
    else:
        print("Usage: storypick hook {install}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="storypick",
        description="Pick the story you are working on from your issue trackers",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    subparsers.add_parser("init", help="Create .storypick/config.json")

    # pick
    pick_parser = subparsers.add_parser("pick", help="Fetch stories and pick one")
    pick_parser.add_argument(
        "--category",
        "-c",
        help="Column to pick from: "
        + ", ".join(c.value for c in Category)
        + " (default: from config)",
    )
    pick_parser.add_argument(
        "--timeout", "-t", type=float, help="Per-source timeout in seconds"
    )
    pick_parser.add_argument(
        "--no-spinner", action="store_true", help="Do not show the progress spinner"
    )

    # current
    subparsers.add_parser("current", help="Print the selected story key")

    # clear
    subparsers.add_parser("clear", help="Forget the selected story")

    # hook
    hook_parser = subparsers.add_parser("hook", help="Git hook commands")
    hook_subparsers = hook_parser.add_subparsers(dest="hook_command")

    hook_install_parser = hook_subparsers.add_parser(
        "install", help="Install the prepare-commit-msg hook"
    )
    hook_install_parser.add_argument(
        "--force", "-f", action="store_true", help="Replace an existing hook"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    handlers = {
        "init": cmd_init,
        "pick": cmd_pick,
        "current": cmd_current,
        "clear": cmd_clear,
        "hook": cmd_hook,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
