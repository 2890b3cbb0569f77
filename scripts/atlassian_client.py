#!/usr/bin/env python3
"""
Agent Skill Toolkit - Atlassian REST Client

Thin authenticated client for the Jira (REST v3) and Confluence (REST v2
and legacy v1) APIs used by jira_cli.py and confluence_cli.py.

Configuration (environment, or a .env file in the working directory):
    ATLASSIAN_SITE       yourcompany.atlassian.net
    ATLASSIAN_EMAIL      you@example.com
    ATLASSIAN_API_TOKEN  token from id.atlassian.com

Every request returns an ApiResponse instead of raising: non-2xx responses
and network failures are folded into ``ok=False`` with a readable error.
"""

from __future__ import annotations

import base64
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence, Union

import requests
from dotenv import load_dotenv

JIRA_API = "rest/api/3"
CONFLUENCE_API = "wiki/api/v2"
CONFLUENCE_LEGACY_API = "wiki/rest/api"

# Seconds; requests has no default timeout
REQUEST_TIMEOUT = 30

TOKEN_URL = "https://id.atlassian.com/manage-profile/security/api-tokens"

QueryParams = Mapping[str, Union[str, Sequence[str]]]


class ConfigError(Exception):
    """Missing credentials or unusable command-line input."""


class AtlassianError(Exception):
    """An API call failed; the message is ready to show to the user."""


@dataclass
class AtlassianConfig:
    site: str
    email: str
    api_token: str

    @property
    def site_url(self) -> str:
        return f"https://{self.site}"


@dataclass
class ApiResponse:
    """Uniform result of one API call.

    Attributes:
        ok: True for 2xx responses
        data: Decoded JSON body (None for 204 or failures)
        error: Human-readable error for failures
        status: HTTP status, None for network failures
    """

    ok: bool
    data: Any = None
    error: str | None = None
    status: int | None = None

    def unwrap(self, fallback: str) -> Any:
        """Return data, or raise AtlassianError with the response error (or fallback)."""
        if not self.ok:
            raise AtlassianError(self.error or fallback)
        return self.data


def load_config(env_file: Path | None = None) -> AtlassianConfig:
    """Read credentials from the environment, loading ``./.env`` first.

    Raises:
        ConfigError: when any of the three settings is missing
    """
    load_dotenv(env_file or Path.cwd() / ".env")

    site = os.environ.get("ATLASSIAN_SITE", "").strip()
    email = os.environ.get("ATLASSIAN_EMAIL", "").strip()
    api_token = os.environ.get("ATLASSIAN_API_TOKEN", "").strip()

    if not site:
        raise ConfigError("ATLASSIAN_SITE not set. Add to .env: ATLASSIAN_SITE=yourcompany.atlassian.net")
    if not email:
        raise ConfigError("ATLASSIAN_EMAIL not set. Add to .env: ATLASSIAN_EMAIL=you@example.com")
    if not api_token:
        raise ConfigError(f"ATLASSIAN_API_TOKEN not set. Generate at: {TOKEN_URL}")

    return AtlassianConfig(site=site, email=email, api_token=api_token)


def build_auth_header(email: str, api_token: str) -> str:
    """Build a Basic auth header value from account email and API token."""
    credentials = base64.b64encode(f"{email}:{api_token}".encode()).decode("ascii")
    return f"Basic {credentials}"


def extract_error_message(text: str) -> str:
    """Pull the most useful message out of a JSON or plain-text error body."""
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if not isinstance(payload, dict):
        return text
    messages = payload.get("errorMessages")
    if messages:
        return ", ".join(str(m) for m in messages)
    return payload.get("message") or payload.get("errorMessage") or text


class AtlassianClient:
    """Authenticated client for one Atlassian site."""

    def __init__(self, config: AtlassianConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.headers = {
            "Authorization": build_auth_header(config.email, config.api_token),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @property
    def site_url(self) -> str:
        return self.config.site_url

    def url(self, namespace: str, endpoint: str) -> str:
        return f"{self.site_url}/{namespace}/{endpoint}"

    def request(
        self,
        method: str,
        url: str,
        params: QueryParams | None = None,
        body: Any = None,
    ) -> ApiResponse:
        """Send one request and normalize the outcome.

        List-valued params repeat the key (``fields=a&fields=b``).
        """
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=json.dumps(body) if body is not None else None,
                headers=self.headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            return ApiResponse(ok=False, error=f"Network error: {exc}")

        if not response.ok:
            message = extract_error_message(response.text)
            return ApiResponse(
                ok=False,
                error=f"API error ({response.status_code}): {message}",
                status=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return ApiResponse(ok=True, status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            return ApiResponse(ok=False, error="Invalid JSON in API response", status=response.status_code)
        return ApiResponse(ok=True, data=data, status=response.status_code)

    # Jira (REST v3)

    def jira_get(self, endpoint: str, params: QueryParams | None = None) -> ApiResponse:
        return self.request("GET", self.url(JIRA_API, endpoint), params=params)

    def jira_post(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("POST", self.url(JIRA_API, endpoint), body=body)

    def jira_put(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("PUT", self.url(JIRA_API, endpoint), body=body)

    # Confluence (REST v2)

    def confluence_get(self, endpoint: str, params: QueryParams | None = None) -> ApiResponse:
        return self.request("GET", self.url(CONFLUENCE_API, endpoint), params=params)

    def confluence_post(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("POST", self.url(CONFLUENCE_API, endpoint), body=body)

    def confluence_put(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("PUT", self.url(CONFLUENCE_API, endpoint), body=body)

    # Confluence legacy (REST v1), needed for CQL search and content writes

    def confluence_legacy_get(self, endpoint: str, params: QueryParams | None = None) -> ApiResponse:
        return self.request("GET", self.url(CONFLUENCE_LEGACY_API, endpoint), params=params)

    def confluence_legacy_post(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("POST", self.url(CONFLUENCE_LEGACY_API, endpoint), body=body)

    def confluence_legacy_put(self, endpoint: str, body: Any) -> ApiResponse:
        return self.request("PUT", self.url(CONFLUENCE_LEGACY_API, endpoint), body=body)


# =============================================================================
# CLI Helpers
# =============================================================================


def parse_json_arg(raw: str, name: str) -> Any:
    """Decode a JSON command-line argument.

    Raises:
        ConfigError: when raw is not valid JSON
    """
    try:
        return json.loads(raw)
    except ValueError:
        raise ConfigError(f"Invalid JSON for {name}: {raw}") from None


def adf_paragraph(text: str) -> dict[str, Any]:
    """Wrap plain text in a single-paragraph Atlassian Document Format document."""
    return {
        "type": "doc",
        "version": 1,
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}],
    }


def output(data: Any) -> None:
    """Print a result as pretty JSON."""
    print(json.dumps(data, indent=2))


def exit_with_error(message: str) -> int:
    """Report a fatal error on stderr and return exit code 1."""
    print(f"Error: {message}", file=sys.stderr)
    return 1
