"""Jira issue source."""

from typing import Any

import httpx

from ..models import Task
from .base import RemoteSource, position_field, text_field

MAX_RESULTS = 50


class JiraSource(RemoteSource):
    """Issues filtered with JQL, authenticated with user + personal access token."""

    def auth(self) -> httpx.Auth:
        return httpx.BasicAuth(self.config.user or "", self.config.token)

    def issues_url(self) -> str:
        return f"{self.base_url}/rest/api/2/search"

    def jql(self, status: str) -> str:
        """Build the JQL: configured equality clauses plus the status filter."""
        parts = [
            f'{field}="{self._escape(value)}"'
            for field, value in sorted(self.config.query.items())
        ]
        parts.append(f'status="{self._escape(status)}"')
        return " and ".join(parts)

    @staticmethod
    def _escape(value: str) -> str:
        return value.replace("\\", "\\\\").replace('"', '\\"')

    def query_params(self, value: str) -> dict[str, Any]:
        return {"jql": self.jql(value), "maxResults": MAX_RESULTS}

    def project(self, item: dict[str, Any]) -> Task | None:
        fields = item.get("fields")
        if not isinstance(fields, dict):
            return None
        key = text_field(item.get("key"))
        title = text_field(fields.get("summary"))
        if key is None or title is None:
            return None
        return Task(
            key=key,
            title=title,
            priority=position_field(item.get("position", fields.get("position"))),
            href=text_field(item.get("self")),
            source=self.name,
        )
