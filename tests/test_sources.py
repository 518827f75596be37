"""Tests for remote issue sources."""

import base64

import httpx
import pytest
import respx

from storypick.models import Category, SourceConfig, SourceKind
from storypick.sources import (
    FetchError,
    FreshreleaseSource,
    JiraSource,
    SourceAuthenticationError,
    SourceDecodeError,
    SourceStatusError,
    SourceTimeoutError,
    SourceTransportError,
    fetch_tasks,
    open_source,
)

FRESHRELEASE_URL = "https://acme.freshrelease.com/PT/issues"
JIRA_URL = "https://jira.acme.com/rest/api/2/search"


@pytest.fixture
def freshrelease_config():
    """Freshrelease source with two configured columns."""
    return SourceConfig(
        name="platform",
        kind=SourceKind.FRESHRELEASE,
        base_url="https://acme.freshrelease.com/",
        token="fr-token",
        team_code="PT",
        columns={"in_progress": "2000000617", "in_review": "2000002392"},
    )


@pytest.fixture
def jira_config():
    """Jira source filtered to one project."""
    return SourceConfig(
        name="jira",
        kind=SourceKind.JIRA,
        base_url="https://jira.acme.com",
        token="pat",
        user="dev@acme.com",
        query={"project": "WEB"},
    )


class TestFreshreleaseSource:
    """Tests for the Freshrelease dialect."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch(self, freshrelease_config):
        """Test fetching and projecting issues."""
        route = respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "issues": [
                        {
                            "key": "PT-12",
                            "title": "Checkout flow",
                            "position": 3,
                            "href": "https://acme.freshrelease.com/PT/issues/PT-12",
                        },
                        {"key": "PT-13", "title": "Search"},
                    ]
                },
            )
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            tasks = await source.fetch(Category.IN_PROGRESS)

        assert [t.key for t in tasks] == ["PT-12", "PT-13"]
        assert tasks[0].title == "Checkout flow"
        assert tasks[0].priority == 3
        assert tasks[0].source == "platform"
        assert tasks[0].href.endswith("PT-12")
        assert tasks[1].priority == 0

        request = route.calls[0].request
        assert request.headers["Authorization"] == "Token fr-token"
        assert request.headers["Accept"] == "application/json"
        assert request.url.params["query_hash[0][condition]"] == "status_id"
        assert request.url.params["query_hash[0][operator]"] == "is"
        assert request.url.params["query_hash[0][value]"] == "2000000617"

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_without_team_code(self, freshrelease_config):
        """The team segment is optional."""
        freshrelease_config.team_code = None
        route = respx.get("https://acme.freshrelease.com/issues").mock(
            return_value=httpx.Response(200, json={"issues": []})
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            tasks = await source.fetch(Category.IN_REVIEW)

        assert tasks == []
        assert route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_malformed_items_are_dropped(self, freshrelease_config):
        """Items missing a key or title do not fail the call."""
        respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "issues": [
                        {"key": "PT-1", "title": "Good"},
                        {"key": "PT-2"},
                        {"title": "No key"},
                        {"key": 7, "title": "Numeric key"},
                        "not an object",
                    ]
                },
            )
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            tasks = await source.fetch(Category.IN_PROGRESS)

        assert [t.key for t in tasks] == ["PT-1"]

    @pytest.mark.asyncio
    async def test_unmapped_category(self, freshrelease_config):
        """A category without a status id fails before any request."""
        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(FetchError) as exc_info:
                await source.fetch(Category.DONE)

        assert "done" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_credential(self, freshrelease_config):
        """A source without a token is rejected."""
        freshrelease_config.token = ""
        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(FetchError):
                await source.fetch(Category.IN_PROGRESS)

    @pytest.mark.asyncio
    async def test_not_opened(self, freshrelease_config):
        """Fetching outside the context manager is an error."""
        source = FreshreleaseSource(freshrelease_config)
        with pytest.raises(FetchError):
            await source.fetch(Category.IN_PROGRESS)


class TestJiraSource:
    """Tests for the Jira dialect."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch(self, jira_config):
        """Test fetching issues through JQL."""
        route = respx.get(JIRA_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "issues": [
                        {
                            "key": "WEB-7",
                            "self": "https://jira.acme.com/rest/api/2/issue/10007",
                            "fields": {"summary": "Dark mode"},
                        },
                        {"key": "WEB-8", "fields": {}},
                    ]
                },
            )
        )

        async with JiraSource(jira_config) as source:
            tasks = await source.fetch(Category.IN_PROGRESS)

        assert len(tasks) == 1
        assert tasks[0].key == "WEB-7"
        assert tasks[0].title == "Dark mode"
        assert tasks[0].href.endswith("/10007")

        request = route.calls[0].request
        expected = base64.b64encode(b"dev@acme.com:pat").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.url.params["jql"] == 'project="WEB" and status="In Progress"'
        assert request.url.params["maxResults"] == "50"

    def test_jql_escapes_quotes(self, jira_config):
        """Quotes in values cannot break out of the JQL string."""
        jira_config.query = {"summary": 'say "hi"'}
        source = JiraSource(jira_config)
        assert source.jql("Done") == 'summary="say \\"hi\\"" and status="Done"'

    @respx.mock
    @pytest.mark.asyncio
    async def test_configured_column_overrides_status(self, jira_config):
        """Columns map categories to custom workflow statuses."""
        jira_config.columns = {"in_review": "Code Review"}
        route = respx.get(JIRA_URL).mock(
            return_value=httpx.Response(200, json={"issues": []})
        )

        async with JiraSource(jira_config) as source:
            await source.fetch(Category.IN_REVIEW)

        assert 'status="Code Review"' in route.calls[0].request.url.params["jql"]


class TestSourceErrors:
    """Error mapping shared by all sources."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_authentication_error(self, freshrelease_config):
        """Test authentication error handling."""
        respx.get(FRESHRELEASE_URL).mock(return_value=httpx.Response(401))

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceAuthenticationError) as exc_info:
                await source.fetch(Category.IN_PROGRESS)

        assert exc_info.value.status_code == 401

    @respx.mock
    @pytest.mark.asyncio
    async def test_api_error(self, freshrelease_config):
        """Test generic API error handling."""
        respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(500, text="Internal Server Error")
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceStatusError) as exc_info:
                await source.fetch(Category.IN_PROGRESS)

        assert "500" in str(exc_info.value)

    @respx.mock
    @pytest.mark.asyncio
    async def test_body_not_json(self, freshrelease_config):
        respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(200, text="<html>login</html>")
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceDecodeError):
                await source.fetch(Category.IN_PROGRESS)

    @respx.mock
    @pytest.mark.asyncio
    async def test_body_without_issues(self, freshrelease_config):
        respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(200, json={"errors": ["nope"]})
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceDecodeError):
                await source.fetch(Category.IN_PROGRESS)

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_error(self, freshrelease_config):
        respx.get(FRESHRELEASE_URL).mock(side_effect=httpx.ConnectError("refused"))

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceTransportError):
                await source.fetch(Category.IN_PROGRESS)

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout(self, freshrelease_config):
        respx.get(FRESHRELEASE_URL).mock(side_effect=httpx.ReadTimeout("slow"))

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceTimeoutError):
                await source.fetch(Category.IN_PROGRESS)

    @respx.mock
    @pytest.mark.asyncio
    async def test_bad_content_encoding(self, freshrelease_config):
        """A body that fails to decompress is a decode error."""
        respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip"
            )
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceDecodeError):
                await source.fetch(Category.IN_PROGRESS)

    @respx.mock
    @pytest.mark.asyncio
    async def test_too_many_redirects(self, freshrelease_config):
        """Request errors outside the transport layer are still fetch errors."""
        respx.get(FRESHRELEASE_URL).mock(side_effect=httpx.TooManyRedirects("loop"))

        async with FreshreleaseSource(freshrelease_config) as source:
            with pytest.raises(SourceTransportError):
                await source.fetch(Category.IN_PROGRESS)

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_finite_position(self, freshrelease_config):
        """Positions that overflow or are NaN count as 0."""
        respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(
                200,
                headers={"Content-Type": "application/json"},
                content=(
                    b'{"issues": [{"key": "PT-1", "title": "x", "position": 1e999},'
                    b' {"key": "PT-2", "title": "y", "position": NaN},'
                    b' {"key": "PT-3", "title": "z", "position": 2.9}]}'
                ),
            )
        )

        async with FreshreleaseSource(freshrelease_config) as source:
            tasks = await source.fetch(Category.IN_PROGRESS)

        assert [(t.key, t.priority) for t in tasks] == [("PT-1", 0), ("PT-2", 0), ("PT-3", 2)]


class TestFetchTasks:
    """Tests for the one-shot fetch helper."""

    def test_auth_schemes(self, freshrelease_config, jira_config):
        """Jira uses httpx basic auth, Freshrelease a Token header."""
        jira = JiraSource(jira_config)
        assert isinstance(jira.auth(), httpx.BasicAuth)
        assert "Authorization" not in jira.headers()

        freshrelease = FreshreleaseSource(freshrelease_config)
        assert freshrelease.auth() is None
        assert freshrelease.headers() == {"Authorization": "Token fr-token"}

    def test_open_source_picks_dialect(self, freshrelease_config, jira_config):
        assert isinstance(open_source(freshrelease_config), FreshreleaseSource)
        assert isinstance(open_source(jira_config), JiraSource)

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_tasks(self, freshrelease_config):
        """Exactly one request per call."""
        route = respx.get(FRESHRELEASE_URL).mock(
            return_value=httpx.Response(
                200, json={"issues": [{"key": "PT-1", "title": "One"}]}
            )
        )

        tasks = await fetch_tasks(freshrelease_config, Category.IN_PROGRESS)

        assert [t.key for t in tasks] == ["PT-1"]
        assert route.call_count == 1
