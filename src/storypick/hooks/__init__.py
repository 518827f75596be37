"""Git integration."""

from .installer import HookError, ensure_gitignored, install_hook

__all__ = ["HookError", "ensure_gitignored", "install_hook"]
