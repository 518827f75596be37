"""Configuration model for storypick."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .category import Category


class ConfigError(Exception):
    """Configuration is missing or malformed."""

    pass


class SourceKind(Enum):
    """Issue tracker dialects a source can speak."""

    FRESHRELEASE = "freshrelease"
    JIRA = "jira"

    @property
    def filters_by_status_name(self) -> bool:
        """Whether categories map to status names rather than status ids."""
        return self is SourceKind.JIRA


@dataclass
class SourceConfig:
    """One remote issue tracker endpoint and its credentials."""

    name: str
    kind: SourceKind
    base_url: str
    token: str
    user: str | None = None  # basic auth only
    team_code: str | None = None
    columns: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)

    def is_configured(self) -> bool:
        """Check if the source carries an endpoint and a usable credential."""
        if self.kind is SourceKind.JIRA:
            return all([self.base_url, self.token, self.user])
        return all([self.base_url, self.token])

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "base_url": self.base_url,
            "token": self.token,
            "user": self.user,
            "team_code": self.team_code,
            "columns": dict(self.columns),
            "query": dict(self.query),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceConfig":
        """Create a SourceConfig from a dictionary."""
        try:
            kind = SourceKind(data.get("kind", SourceKind.FRESHRELEASE.value))
        except ValueError:
            kinds = ", ".join(k.value for k in SourceKind)
            raise ConfigError(
                f"Unknown source kind '{data.get('kind')}'. Choose one of: {kinds}"
            ) from None

        base_url = data.get("base_url")
        if not base_url:
            raise ConfigError(f"Source '{data.get('name', '?')}' has no base_url")

        return cls(
            name=data.get("name") or base_url,
            kind=kind,
            base_url=base_url,
            token=data.get("token", ""),
            user=data.get("user"),
            team_code=data.get("team_code"),
            columns={str(k): str(v) for k, v in data.get("columns", {}).items()},
            query={str(k): str(v) for k, v in data.get("query", {}).items()},
        )


@dataclass
class StorypickConfig:
    """Project configuration: where stories come from and how to fetch them."""

    version: str = "0.1"
    default_category: Category = Category.IN_PROGRESS
    timeout: float = 30.0  # seconds, per source
    sources: list[SourceConfig] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "default_category": self.default_category.value,
            "timeout": self.timeout,
            "sources": [s.to_dict() for s in self.sources],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StorypickConfig":
        """Create a StorypickConfig from a dictionary."""
        try:
            category = Category.parse(
                data.get("default_category", Category.IN_PROGRESS.value)
            )
        except ValueError as e:
            raise ConfigError(str(e)) from None

        try:
            timeout = float(data.get("timeout", 30.0))
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid timeout: {data.get('timeout')!r}") from None

        return cls(
            version=data.get("version", "0.1"),
            default_category=category,
            timeout=timeout,
            sources=[SourceConfig.from_dict(s) for s in data.get("sources", [])],
        )

    @classmethod
    def example(cls) -> "StorypickConfig":
        """A starter config with placeholder values to edit."""
        return cls(
            sources=[
                SourceConfig(
                    name="platform",
                    kind=SourceKind.FRESHRELEASE,
                    base_url="https://your-instance.freshrelease.com",
                    token="your access token",
                    team_code="PT",
                    columns={
                        Category.IN_PROGRESS.value: "your status id",
                        Category.IN_REVIEW.value: "your status id",
                    },
                )
            ]
        )
