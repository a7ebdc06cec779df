"""
Publish a tree of pages to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import os
from pathlib import Path
from typing import overload
from urllib.parse import urlparse


class ArgumentError(ValueError):
    "Raised when wrong arguments are passed to a function call."


class PublisherError(RuntimeError):
    "Raised when publishing a page tree to Confluence has to be aborted."


class ConfigurationError(PublisherError):
    "Raised when the metadata file is missing, unreadable or malformed."


class ContentReadError(PublisherError):
    "Raised when a page content file or an attachment cannot be read."

    path: Path

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class RemoteRequestError(PublisherError):
    "Raised when an HTTP request cannot be sent to Confluence."


class RemoteResponseError(PublisherError):
    """
    Raised when Confluence rejects a request or returns an unusable response.

    :param status_code: HTTP status code of the response.
    :param reason: HTTP reason phrase of the response.
    """

    status_code: int
    reason: str

    def __init__(self, message: str, *, status_code: int, reason: str) -> None:
        super().__init__(f"{message}: {status_code} {reason}")
        self.status_code = status_code
        self.reason = reason


class SerializationError(PublisherError):
    "Raised when a request payload cannot be converted to JSON."


@overload
def _validate_domain(domain: str) -> str: ...


@overload
def _validate_domain(domain: str | None) -> str | None: ...


def _validate_domain(domain: str | None) -> str | None:
    if domain is None:
        return None

    if domain.startswith(("http://", "https://")) or domain.endswith("/"):
        raise ArgumentError("Confluence domain looks like a URL; only host name required")

    return domain


@overload
def _validate_base_path(base_path: str) -> str: ...


@overload
def _validate_base_path(base_path: str | None) -> str | None: ...


def _validate_base_path(base_path: str | None) -> str | None:
    if base_path is None:
        return None

    if not base_path.startswith("/") or not base_path.endswith("/"):
        raise ArgumentError("Confluence base path must start and end with a '/'")

    return base_path


def _validate_api_url(api_url: str) -> str:
    scheme, netloc, _, params, query, fragment = urlparse(api_url)

    if scheme not in ("http", "https") or not netloc:
        raise ArgumentError("Confluence API URL must be an absolute HTTP or HTTPS URL")
    if params:
        raise ArgumentError("expected: Confluence API URL with no parameters")
    if query:
        raise ArgumentError("expected: Confluence API URL with no query string")
    if fragment:
        raise ArgumentError("expected: Confluence API URL with no fragment")

    return api_url.rstrip("/")


class ConfluenceConnectionProperties:
    """
    Properties related to connecting to Confluence.

    Values not passed explicitly are read from environment variables. If both the user name and the API key are
    set, requests carry a basic authentication header; otherwise no authentication header is added.

    :param api_url: Confluence REST API endpoint (e.g. `https://example.atlassian.net/wiki/rest/api`).
    :param domain: Confluence organization domain, used when no API URL is given.
    :param base_path: Base path for Confluence (default: `/wiki/`), used when no API URL is given.
    :param user_name: Confluence user name.
    :param api_key: Confluence API key or password.
    :param headers: Additional HTTP headers to pass to Confluence REST API calls.
    """

    api_url: str
    user_name: str | None
    api_key: str | None
    headers: dict[str, str] | None

    def __init__(
        self,
        *,
        api_url: str | None = None,
        domain: str | None = None,
        base_path: str | None = None,
        user_name: str | None = None,
        api_key: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        opt_api_url = api_url or os.getenv("CONFLUENCE_API_URL")
        opt_domain = _validate_domain(domain or os.getenv("CONFLUENCE_DOMAIN"))
        opt_base_path = _validate_base_path(base_path or os.getenv("CONFLUENCE_PATH"))
        opt_user_name = user_name or os.getenv("CONFLUENCE_USER_NAME")
        opt_api_key = api_key or os.getenv("CONFLUENCE_API_KEY")

        if not opt_api_url:
            if not opt_domain:
                raise ArgumentError("Confluence API URL or domain required")
            opt_api_url = f"https://{opt_domain}{opt_base_path or '/wiki/'}rest/api"

        self.api_url = _validate_api_url(opt_api_url)
        self.user_name = opt_user_name
        self.api_key = opt_api_key
        self.headers = headers
