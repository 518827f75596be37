"""JSON-based configuration store."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..models import ConfigError, StorypickConfig

CONFIG_DIRNAME = ".storypick"
CONFIG_FILENAME = "config.json"


class ConfigStore:
    """Project configuration in .storypick/config.json."""

    def __init__(self, root_path: str | Path | None = None):
        """Initialize the store.

        Args:
            root_path: Root directory containing .storypick/. Defaults to current directory.
        """
        self.root = Path(root_path) if root_path else Path.cwd()
        self.config_dir = self.root / CONFIG_DIRNAME
        self.config_file = self.config_dir / CONFIG_FILENAME

    def ensure_initialized(self) -> None:
        """Ensure the config file exists."""
        if not self.config_file.exists():
            raise FileNotFoundError(
                f"storypick not initialized. Run 'storypick init' in {self.root}"
            )

    def initialize(self) -> bool:
        """Create .storypick/ with an example config. Returns False if one exists."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        if self.config_file.exists():
            return False
        self._write_json(self.config_file, StorypickConfig.example().to_dict())
        return True

    def _read_json(self, path: Path) -> dict[str, Any]:
        """Read and parse a JSON file."""
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"{path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object")
        return data

    def _write_json(self, path: Path, data: dict[str, Any]) -> None:
        """Write data to JSON file atomically with sorted keys for git diffs."""
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent, prefix=".tmp_", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(temp_path, path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def load(self) -> StorypickConfig:
        """Load the project configuration."""
        self.ensure_initialized()
        return StorypickConfig.from_dict(self._read_json(self.config_file))

    def save(self, config: StorypickConfig) -> None:
        """Save the project configuration."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self._write_json(self.config_file, config.to_dict())
