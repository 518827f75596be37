"""Git hook that stamps commit messages with the selected story."""

import stat
from pathlib import Path

from ..store.config_store import CONFIG_DIRNAME
from ..store.story_file import STORY_FILENAME

HOOK_NAME = "prepare-commit-msg"
HOOK_MARKER = "# installed by storypick"

HOOK_SCRIPT = f"""#!/bin/sh
{HOOK_MARKER}
# Prefixes the commit message with [<story key>] from {STORY_FILENAME}.
STORY_FILE="$(git rev-parse --show-toplevel)/{STORY_FILENAME}"
[ -f "$STORY_FILE" ] || exit 0
case "$2" in merge|squash) exit 0 ;; esac
KEY=$(sed -n 's/^story_id=//p' "$STORY_FILE" | head -n 1)
[ -n "$KEY" ] || exit 0
grep -qF "[$KEY]" "$1" && exit 0
printf '[%s] ' "$KEY" | cat - "$1" > "$1.storypick" && mv "$1.storypick" "$1"
"""

DEFAULT_IGNORES = [STORY_FILENAME, f"{CONFIG_DIRNAME}/"]


class HookError(Exception):
    """The hook could not be installed."""

    pass


def install_hook(root: str | Path, force: bool = False) -> Path:
    """Install the prepare-commit-msg hook into ``root``'s git repository.

    Args:
        root: Work tree root containing .git/
        force: Replace a hook that storypick did not write

    Returns:
        Path of the installed hook

    Raises:
        HookError: If root is not a git work tree or a foreign hook exists
    """
    git_dir = Path(root) / ".git"
    if not git_dir.is_dir():
        raise HookError(f"{root} is not the root of a git work tree")

    hook_path = git_dir / "hooks" / HOOK_NAME
    if hook_path.exists() and not force:
        if HOOK_MARKER not in hook_path.read_text(errors="replace"):
            raise HookError(
                f"{hook_path} already exists. Use --force to replace it."
            )

    hook_path.parent.mkdir(parents=True, exist_ok=True)
    hook_path.write_text(HOOK_SCRIPT)
    mode = hook_path.stat().st_mode
    hook_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return hook_path


def ensure_gitignored(root: str | Path, entries: list[str] | None = None) -> list[str]:
    """Append missing entries to .gitignore. Returns the entries added."""
    if entries is None:
        entries = DEFAULT_IGNORES

    gitignore = Path(root) / ".gitignore"
    existing = gitignore.read_text() if gitignore.exists() else ""
    present = {line.strip() for line in existing.splitlines()}

    missing = [e for e in entries if e not in present]
    if not missing:
        return []

    with open(gitignore, "a") as f:
        if existing and not existing.endswith("\n"):
            f.write("\n")
        for entry in missing:
            f.write(f"{entry}\n")
    return missing
