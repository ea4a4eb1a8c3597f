"""GitHub REST API adapter.

API Details:
    Listing: GET {api_url}/orgs/{org}/repos?type=all&per_page=N&page=P
    Protection: GET {api_url}/repos/{org}/{repo}/branches/{branch}/protection
    Authentication: Bearer token
    Response: JSON array of repository objects / protection object
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests
from pydantic import ValidationError

from repo_norms.config.models import GitHubSettings
from repo_norms.domain.models import NO_PERMISSION_ERROR, BranchProtection
from repo_norms.logging import get_logger

from .base import BaseAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")

GITHUB_MEDIA_TYPE = "application/vnd.github+json"
DEFAULT_BRANCH = "main"


class GitHubAdapter(BaseAdapter):
    """Adapter listing an organization's repositories through the GitHub API.

    Besides the listing, the adapter looks up the protection of each
    repository's default branch and attaches the resulting descriptor to the
    record under every configured protection field.
    """

    ADAPTER_NAME = "github"

    def __init__(
        self,
        org: str,
        token: str,
        settings: Optional[GitHubSettings] = None,
        include_archived: bool = False,
        protection_fields: Iterable[str] = ("branch_protection",),
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize adapter with configuration.

        Args:
            org: Organization login
            token: GitHub token with read access to the organization
            settings: GitHub acquisition settings (defaults apply if None)
            include_archived: Keep archived repositories
            protection_fields: Record keys the protection descriptor is attached
                under; empty disables protection lookups
            session: Optional pre-built requests session

        Raises:
            AdapterConfigurationError: If org or token is empty
        """
        settings = settings or GitHubSettings()
        super().__init__(
            include_archived=include_archived,
            include_private=settings.include_private,
            include_public=settings.include_public,
            include_internal=settings.include_internal,
        )
        if not org or not org.strip():
            raise AdapterConfigurationError("GitHub organization cannot be empty")
        if not token or not token.strip():
            raise AdapterConfigurationError("GitHub token cannot be empty")

        self.org = org.strip()
        self.settings = settings
        self.timeout = settings.timeout
        self.protection_fields = list(protection_fields) if settings.fetch_branch_protection else []

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": GITHUB_MEDIA_TYPE,
                "Authorization": f"Bearer {token.strip()}",
                "User-Agent": settings.user_agent,
            }
        )

    def fetch_records(self) -> List[Dict[str, Any]]:
        """List the organization's repositories and attach branch protection.

        Returns:
            Filtered repository records, in listing order

        Raises:
            AdapterError: If the listing fails
        """
        records = self.list_repositories()
        if records and self.protection_fields:
            self.fetch_all_branch_protections(records)
        return records

    def list_repositories(self) -> List[Dict[str, Any]]:
        """Fetch every listing page and apply the pre-filters.

        Raises:
            AdapterHTTPError: On HTTP errors (403/404 are logged with a hint)
            AdapterTimeoutError: On request timeout
            AdapterResponseError: If a page is not a JSON array
        """
        url = f"{self.settings.api_url}/orgs/{self.org}/repos"
        per_page = self.settings.repos_per_page
        records: List[Dict[str, Any]] = []
        page = 1

        logger.info(
            f"Fetching repositories from organization: {self.org}",
            extra={"event": "adapter.list.started", "org": self.org, "url": url},
        )

        while True:
            params = {"type": "all", "per_page": str(per_page), "page": str(page)}
            try:
                data = self._get_json(url, params=params)
            except AdapterHTTPError as e:
                hint = _LISTING_HINTS.get(e.status_code)
                if hint:
                    logger.error(
                        hint,
                        extra={
                            "event": "adapter.list.error",
                            "org": self.org,
                            "status_code": e.status_code,
                        },
                    )
                raise

            if not isinstance(data, list):
                raise AdapterResponseError(
                    f"Expected JSON array of repositories, got {type(data).__name__}"
                )

            kept = self.filter_records([repo for repo in data if isinstance(repo, dict)])
            records.extend(kept)
            logger.info(
                f"Fetched {len(kept)} repositories from page {page}",
                extra={
                    "event": "adapter.list.page",
                    "page": page,
                    "received": len(data),
                    "kept": len(kept),
                },
            )

            if len(data) < per_page:
                break
            page += 1
            time.sleep(self.settings.page_delay_seconds)

        logger.info(
            f"Total repositories found: {len(records)}",
            extra={"event": "adapter.list.completed", "org": self.org, "count": len(records)},
        )
        return records

    def fetch_branch_protection(self, record: Mapping[str, Any]) -> BranchProtection:
        """Look up the protection of a repository's default branch.

        Never raises: a missing protection is "disabled", a forbidden or
        failed lookup is an "unknown" descriptor carrying the error.
        """
        branch = record.get("default_branch") or DEFAULT_BRANCH
        url = f"{self.settings.api_url}/repos/{self.org}/{record.get('name')}/branches/{branch}/protection"

        try:
            data = self._get_json(url)
        except AdapterHTTPError as e:
            if e.status_code == 404:
                return BranchProtection.disabled()
            if e.status_code == 403:
                return BranchProtection.unknown(NO_PERMISSION_ERROR)
            return BranchProtection.unknown(str(e))
        except AdapterError as e:
            return BranchProtection.unknown(str(e))

        if not isinstance(data, dict):
            return BranchProtection.unknown(
                f"Unexpected protection payload: {type(data).__name__}"
            )

        try:
            return BranchProtection.from_api(data)
        except ValidationError as e:
            logger.warning(
                f"Malformed branch protection payload for {record.get('name')}",
                extra={"event": "adapter.protection.malformed", "repo": record.get("name")},
            )
            return BranchProtection.unknown(str(e))

    def fetch_all_branch_protections(self, records: List[Dict[str, Any]]) -> None:
        """Attach a protection descriptor to every record, in place."""
        total = len(records)
        logger.info(
            "Fetching branch protection settings for all repositories",
            extra={"event": "adapter.protection.started", "count": total},
        )

        unknown = 0
        for index, record in enumerate(records):
            logger.debug(
                f"Fetching branch protection for {record.get('full_name')} ({index + 1}/{total})",
                extra={"event": "adapter.protection.request", "repo": record.get("full_name")},
            )
            protection = self.fetch_branch_protection(record)
            if not protection.is_known:
                unknown += 1
            for field_name in self.protection_fields:
                record[field_name] = protection.to_descriptor()

            if index + 1 < total:
                time.sleep(self.settings.protection_delay_seconds)

        logger.info(
            "Branch protection fetching complete",
            extra={"event": "adapter.protection.completed", "count": total, "unknown": unknown},
        )

    def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """GET a URL and parse its JSON body.

        Raises:
            AdapterHTTPError: On 4xx or 5xx HTTP status, or if no response was received
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On invalid JSON
        """
        try:
            logger.debug(
                f"HTTP GET request to {url}",
                extra={"event": "adapter.fetch.request", "url": url, "timeout": self.timeout},
            )
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={"event": "adapter.fetch.error", "error_type": "Timeout", "url": url},
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={"event": "adapter.fetch.error", "error_type": type(e).__name__, "url": url},
            )
            raise AdapterHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if response.status_code >= 400:
            log_level = logging.WARNING if response.status_code >= 500 else logging.DEBUG
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "adapter.fetch.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            raise AdapterResponseError(f"Failed to parse JSON response from {url}: {e}") from e


_LISTING_HINTS = {
    403: "Access denied. Please check your token permissions.",
    404: "Organization not found. Please check the organization name.",
}
