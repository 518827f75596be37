"""Freshrelease issue source."""

from typing import Any

from ..models import Task
from .base import RemoteSource, position_field, text_field


class FreshreleaseSource(RemoteSource):
    """Issues filtered by status id, authenticated with an API token."""

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Token {self.config.token}"}

    def issues_url(self) -> str:
        if self.config.team_code:
            return f"{self.base_url}/{self.config.team_code}/issues"
        return f"{self.base_url}/issues"

    def query_params(self, value: str) -> dict[str, Any]:
        return {
            "query_hash[0][condition]": "status_id",
            "query_hash[0][operator]": "is",
            "query_hash[0][value]": value,
        }

    def project(self, item: dict[str, Any]) -> Task | None:
        key = text_field(item.get("key"))
        title = text_field(item.get("title"))
        if key is None or title is None:
            return None
        return Task(
            key=key,
            title=title,
            priority=position_field(item.get("position")),
            href=text_field(item.get("href")) or text_field(item.get("self")),
            source=self.name,
        )
