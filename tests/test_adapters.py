"""Unit tests for repository adapters."""

import json
from unittest.mock import MagicMock, Mock, call, patch

import pytest
import requests
import yaml

from repo_norms.adapters import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
    GitHubAdapter,
    SnapshotAdapter,
    get_adapter,
    record_visibility,
)
from repo_norms.config.models import GitHubSettings, ReportSettings
from repo_norms.domain import NO_PERMISSION_ERROR

API = "https://api.github.com"


# ============================================================================
# Fixtures and helpers
# ============================================================================


def make_response(status_code=200, json_data=None, reason="OK"):
    """Build a mocked requests response."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = json_data
    return response


def make_repo(name, **overrides):
    """Minimal repository listing entry."""
    repo = {
        "name": name,
        "full_name": f"acme/{name}",
        "private": True,
        "visibility": "private",
        "archived": False,
        "default_branch": "main",
    }
    repo.update(overrides)
    return repo


@pytest.fixture
def session():
    """Mocked requests session with a real header dict."""
    mock_session = MagicMock()
    mock_session.headers = {}
    return mock_session


@pytest.fixture
def settings():
    return GitHubSettings(repos_per_page=2, page_delay_seconds=0.5, protection_delay_seconds=0.25)


@pytest.fixture
def adapter(session, settings):
    return GitHubAdapter("acme", "ghp_test", settings=settings, session=session)


@pytest.fixture
def mock_sleep():
    with patch("repo_norms.adapters.github.time.sleep") as sleep:
        yield sleep


PROTECTION_PAYLOAD = {
    "url": "https://api.github.com/repos/acme/api/branches/main/protection",
    "required_status_checks": {
        "url": "https://api.github.com/repos/acme/api/branches/main/protection/required_status_checks",
        "strict": True,
        "contexts": ["ci"],
        "contexts_url": "https://api.github.com/repos/acme/api/branches/main/protection/required_status_checks/contexts",
    },
    "enforce_admins": {"url": "https://api.github.com/x", "enabled": True},
    "required_pull_request_reviews": {
        "url": "https://api.github.com/y",
        "dismiss_stale_reviews": False,
        "required_approving_review_count": 1,
    },
    "allow_force_pushes": {"enabled": False},
    "allow_deletions": {"enabled": False},
    "required_conversation_resolution": {"enabled": True},
}


# ============================================================================
# Pre-filter tests
# ============================================================================


class TestRecordFilters:
    """Test archived and visibility pre-filters shared by all adapters."""

    @pytest.mark.parametrize(
        "record,expected",
        [
            ({"visibility": "internal", "private": True}, "internal"),
            ({"visibility": "PUBLIC"}, "public"),
            ({"private": True}, "private"),
            ({"private": False}, "public"),
            ({"visibility": "secret", "private": True}, "private"),
            ({}, "public"),
        ],
    )
    def test_record_visibility(self, record, expected):
        assert record_visibility(record) == expected

    def test_archived_dropped_by_default(self, sample_records, tmp_path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps(sample_records))

        records = SnapshotAdapter(path).fetch_records()

        assert "legacy" not in [r["name"] for r in records]
        assert len(records) == 4

    def test_archived_kept_when_enabled(self, sample_records, tmp_path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps(sample_records))

        records = SnapshotAdapter(path, include_archived=True).fetch_records()

        assert [r["name"] for r in records][-1] == "legacy"

    def test_visibility_classes_excluded(self, sample_records, tmp_path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps(sample_records))

        records = SnapshotAdapter(
            path, include_public=False, include_internal=False
        ).fetch_records()

        assert [r["name"] for r in records] == ["api", "web"]


# ============================================================================
# GitHub adapter tests
# ============================================================================


class TestGitHubAdapterInit:
    """Test GitHub adapter construction."""

    def test_session_headers(self, adapter, session):
        assert session.headers["Authorization"] == "Bearer ghp_test"
        assert session.headers["Accept"] == "application/vnd.github+json"
        assert session.headers["User-Agent"] == "repo-norms/1.0"

    @pytest.mark.parametrize("org,token", [("", "token"), ("  ", "token"), ("acme", "")])
    def test_empty_org_or_token(self, session, org, token):
        with pytest.raises(AdapterConfigurationError):
            GitHubAdapter(org, token, session=session)

    def test_protection_disabled_by_settings(self, session):
        adapter = GitHubAdapter(
            "acme",
            "token",
            settings=GitHubSettings(fetch_branch_protection=False),
            session=session,
        )

        assert adapter.protection_fields == []


class TestRepositoryListing:
    """Test paginated repository listing."""

    def test_pagination_until_short_page(self, adapter, session, mock_sleep):
        session.get.side_effect = [
            make_response(json_data=[make_repo("a"), make_repo("b")]),
            make_response(json_data=[make_repo("c")]),
        ]

        records = adapter.list_repositories()

        assert [r["name"] for r in records] == ["a", "b", "c"]
        assert session.get.call_args_list == [
            call(
                f"{API}/orgs/acme/repos",
                params={"type": "all", "per_page": "2", "page": "1"},
                timeout=30,
            ),
            call(
                f"{API}/orgs/acme/repos",
                params={"type": "all", "per_page": "2", "page": "2"},
                timeout=30,
            ),
        ]
        mock_sleep.assert_called_once_with(0.5)

    def test_empty_final_page(self, adapter, session, mock_sleep):
        session.get.side_effect = [
            make_response(json_data=[make_repo("a"), make_repo("b")]),
            make_response(json_data=[]),
        ]

        assert len(adapter.list_repositories()) == 2
        assert session.get.call_count == 2

    def test_archived_filtered_per_page(self, adapter, session, mock_sleep):
        session.get.side_effect = [
            make_response(json_data=[make_repo("a", archived=True), make_repo("b")]),
            make_response(json_data=[]),
        ]

        records = adapter.list_repositories()

        assert [r["name"] for r in records] == ["b"]
        # A full page still triggers the next request even if entries were dropped
        assert session.get.call_count == 2

    @pytest.mark.parametrize("status_code", [403, 404, 500])
    def test_listing_http_error(self, adapter, session, status_code):
        session.get.return_value = make_response(status_code, reason="Error")

        with pytest.raises(AdapterHTTPError) as exc_info:
            adapter.list_repositories()

        assert exc_info.value.status_code == status_code

    def test_listing_not_a_list(self, adapter, session):
        session.get.return_value = make_response(json_data={"message": "nope"})

        with pytest.raises(AdapterResponseError):
            adapter.list_repositories()

    def test_listing_timeout(self, adapter, session):
        session.get.side_effect = requests.exceptions.Timeout()

        with pytest.raises(AdapterTimeoutError):
            adapter.list_repositories()

    def test_connection_error(self, adapter, session):
        session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(AdapterHTTPError) as exc_info:
            adapter.list_repositories()

        assert exc_info.value.status_code == 0

    def test_invalid_json(self, adapter, session):
        response = make_response()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response

        with pytest.raises(AdapterResponseError):
            adapter.list_repositories()

    def test_custom_api_url(self, session, mock_sleep):
        adapter = GitHubAdapter(
            "acme",
            "token",
            settings=GitHubSettings(api_url="https://ghe.example/api/v3/"),
            session=session,
        )
        session.get.return_value = make_response(json_data=[])

        adapter.list_repositories()

        assert session.get.call_args.args[0] == "https://ghe.example/api/v3/orgs/acme/repos"


class TestBranchProtection:
    """Test branch protection lookups."""

    def test_enabled_protection(self, adapter, session):
        session.get.return_value = make_response(json_data=PROTECTION_PAYLOAD)

        descriptor = adapter.fetch_branch_protection(make_repo("api")).to_descriptor()

        assert session.get.call_args.args[0] == (
            f"{API}/repos/acme/api/branches/main/protection"
        )
        assert descriptor["enabled"] is True
        assert descriptor["enforce_admins"] is True
        assert descriptor["allow_force_pushes"] is False
        assert descriptor["lock_branch"] is False
        assert descriptor["required_conversation_resolution"] is True
        assert descriptor["restrictions"] is None
        assert descriptor["required_status_checks"] == {"strict": True, "contexts": ["ci"]}
        assert "url" not in descriptor["required_pull_request_reviews"]
        assert "error" not in descriptor

    def test_default_branch_used(self, adapter, session):
        session.get.return_value = make_response(json_data=PROTECTION_PAYLOAD)

        adapter.fetch_branch_protection(make_repo("tools", default_branch="develop"))

        assert session.get.call_args.args[0].endswith("/repos/acme/tools/branches/develop/protection")

    def test_missing_default_branch_falls_back_to_main(self, adapter, session):
        session.get.return_value = make_response(json_data=PROTECTION_PAYLOAD)

        adapter.fetch_branch_protection({"name": "tools"})

        assert session.get.call_args.args[0].endswith("/branches/main/protection")

    def test_not_found_means_disabled(self, adapter, session):
        session.get.return_value = make_response(404, reason="Not Found")

        protection = adapter.fetch_branch_protection(make_repo("api"))

        assert protection.to_descriptor() == {"enabled": False}

    def test_forbidden_means_unknown(self, adapter, session):
        session.get.return_value = make_response(403, reason="Forbidden")

        protection = adapter.fetch_branch_protection(make_repo("api"))

        assert protection.to_descriptor() == {"enabled": None, "error": NO_PERMISSION_ERROR}
        assert not protection.is_known

    def test_server_error_means_unknown(self, adapter, session):
        session.get.return_value = make_response(500, reason="Internal Server Error")

        descriptor = adapter.fetch_branch_protection(make_repo("api")).to_descriptor()

        assert descriptor["enabled"] is None
        assert "500" in descriptor["error"]

    def test_timeout_means_unknown(self, adapter, session):
        session.get.side_effect = requests.exceptions.Timeout()

        descriptor = adapter.fetch_branch_protection(make_repo("api")).to_descriptor()

        assert descriptor["enabled"] is None
        assert "timed out" in descriptor["error"]

    def test_unexpected_payload(self, adapter, session):
        session.get.return_value = make_response(json_data=["not", "an", "object"])

        descriptor = adapter.fetch_branch_protection(make_repo("api")).to_descriptor()

        assert descriptor["enabled"] is None
        assert descriptor["error"].startswith("Unexpected protection payload")

    @pytest.mark.parametrize(
        "payload",
        [
            {"restrictions": "bogus"},
            {"required_status_checks": ["ci"]},
        ],
    )
    def test_malformed_settings_mean_unknown(self, adapter, session, payload):
        """Test nested settings of the wrong type yield an unknown descriptor."""
        session.get.return_value = make_response(json_data=payload)

        protection = adapter.fetch_branch_protection(make_repo("api"))
        descriptor = protection.to_descriptor()

        assert not protection.is_known
        assert descriptor["enabled"] is None
        assert descriptor["error"]

    def test_descriptors_attached_with_delay(self, adapter, session, mock_sleep):
        records = [make_repo("a"), make_repo("b"), make_repo("c")]
        session.get.side_effect = [
            make_response(json_data=PROTECTION_PAYLOAD),
            make_response(404, reason="Not Found"),
            make_response(403, reason="Forbidden"),
        ]

        adapter.fetch_all_branch_protections(records)

        assert records[0]["branch_protection"]["enabled"] is True
        assert records[1]["branch_protection"] == {"enabled": False}
        assert records[2]["branch_protection"]["error"] == NO_PERMISSION_ERROR
        # No pause after the last lookup
        assert mock_sleep.call_args_list == [call(0.25), call(0.25)]


class TestFetchRecords:
    """Test the combined listing and protection flow."""

    def test_listing_then_protection(self, adapter, session, mock_sleep):
        session.get.side_effect = [
            make_response(json_data=[make_repo("a")]),
            make_response(404, reason="Not Found"),
        ]

        records = adapter.fetch_records()

        assert records == [dict(make_repo("a"), branch_protection={"enabled": False})]

    def test_no_protection_lookups_when_disabled(self, session, mock_sleep):
        adapter = GitHubAdapter("acme", "token", protection_fields=[], session=session)
        session.get.return_value = make_response(json_data=[make_repo("a")])

        records = adapter.fetch_records()

        assert session.get.call_count == 1
        assert "branch_protection" not in records[0]

    def test_multiple_protection_fields(self, session, mock_sleep):
        adapter = GitHubAdapter(
            "acme", "token", protection_fields=["branch_protection", "main_protection"],
            session=session,
        )
        session.get.side_effect = [
            make_response(json_data=[make_repo("a")]),
            make_response(404, reason="Not Found"),
        ]

        record = adapter.fetch_records()[0]

        assert record["branch_protection"] == record["main_protection"] == {"enabled": False}

    def test_listing_failure_propagates(self, adapter, session):
        session.get.return_value = make_response(404, reason="Not Found")

        with pytest.raises(AdapterError):
            adapter.fetch_records()


# ============================================================================
# Snapshot adapter tests
# ============================================================================


class TestSnapshotAdapter:
    """Test loading records from snapshot files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(AdapterConfigurationError):
            SnapshotAdapter(tmp_path / "missing.json")

    def test_yaml_snapshot_with_wrapper(self, tmp_path):
        path = tmp_path / "repos.yaml"
        path.write_text(yaml.safe_dump({"repositories": [make_repo("a"), make_repo("b")]}))

        records = SnapshotAdapter(path).fetch_records()

        assert [r["name"] for r in records] == ["a", "b"]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "repos.json"
        path.write_text("[{not json")

        with pytest.raises(AdapterResponseError):
            SnapshotAdapter(path).fetch_records()

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps({"name": "api"}))

        with pytest.raises(AdapterResponseError) as exc_info:
            SnapshotAdapter(path).fetch_records()

        assert "list of repositories" in str(exc_info.value)

    def test_non_object_entries(self, tmp_path):
        path = tmp_path / "repos.json"
        path.write_text(json.dumps([make_repo("a"), "b", 3]))

        with pytest.raises(AdapterResponseError) as exc_info:
            SnapshotAdapter(path).fetch_records()

        assert "positions: 1, 2" in str(exc_info.value)


# ============================================================================
# Factory tests
# ============================================================================


class TestAdapterFactory:
    """Test get_adapter."""

    def test_github_adapter(self):
        adapter = get_adapter(
            "github",
            github_settings=GitHubSettings(include_internal=False),
            report_settings=ReportSettings(include_archived=True),
            org="acme",
            token="token",
            protection_fields=["branch_protection"],
        )

        assert isinstance(adapter, GitHubAdapter)
        assert adapter.org == "acme"
        assert adapter.include_archived is True
        assert adapter.include_internal is False

    def test_github_requires_token(self):
        with pytest.raises(AdapterConfigurationError):
            get_adapter("github", org="acme")

    def test_snapshot_adapter(self, tmp_path):
        path = tmp_path / "repos.json"
        path.write_text("[]")

        adapter = get_adapter(
            "SNAPSHOT", snapshot_path=path, github_settings=GitHubSettings(include_public=False)
        )

        assert isinstance(adapter, SnapshotAdapter)
        assert adapter.include_public is False

    def test_snapshot_requires_path(self):
        with pytest.raises(AdapterConfigurationError):
            get_adapter("snapshot")

    def test_unknown_source(self):
        with pytest.raises(AdapterConfigurationError) as exc_info:
            get_adapter("gitlab")

        assert "Unknown record source" in str(exc_info.value)
