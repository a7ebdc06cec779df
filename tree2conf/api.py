"""
Publish a tree of pages to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import base64
import logging
import mimetypes
from pathlib import Path
from types import TracebackType
from typing import Any

import requests

from .api_types import (
    ConfluenceAncestor,
    ConfluenceContentType,
    ConfluenceCreatePageRequest,
    ConfluencePageBody,
    ConfluencePageStorage,
    ConfluenceRepresentation,
    ConfluenceSpace,
)
from .environment import ConfluenceConnectionProperties, ContentReadError, RemoteRequestError, RemoteResponseError
from .serializer import object_to_json_payload

LOGGER = logging.getLogger(__name__)


def basic_auth_header(user_name: str, password: str) -> str:
    "Produces the value of an HTTP `Authorization` header for basic authentication."

    credentials = base64.b64encode(f"{user_name}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {credentials}"


class ConfluenceAPI:
    """
    Represents an active connection to a Confluence server.
    """

    properties: ConfluenceConnectionProperties
    session: "ConfluenceSession | None" = None

    def __init__(self, properties: ConfluenceConnectionProperties | None = None) -> None:
        self.properties = properties or ConfluenceConnectionProperties()

    def __enter__(self) -> "ConfluenceSession":
        session = requests.Session()
        if self.properties.headers:
            session.headers.update(self.properties.headers)

        self.session = ConfluenceSession(
            session,
            api_url=self.properties.api_url,
            user_name=self.properties.user_name,
            api_key=self.properties.api_key,
        )
        return self.session

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None


class ConfluenceSession:
    """
    Information about an open session to a Confluence server.

    Requests are sent one at a time; every response is released before the method that sent it returns.
    """

    _session: requests.Session
    _api_url: str
    _user_name: str | None
    _api_key: str | None

    def __init__(
        self,
        session: requests.Session,
        *,
        api_url: str,
        user_name: str | None = None,
        api_key: str | None = None,
    ) -> None:
        """
        Initializes a session with a transport that is already configured.

        :param session: HTTP session used to send requests, e.g. with custom headers, cookies or proxies.
        :param api_url: Confluence REST API endpoint, e.g. `https://example.atlassian.net/wiki/rest/api`.
        :param user_name: Confluence user name.
        :param api_key: Confluence API key or password.
        """

        self._session = session
        self._api_url = api_url.rstrip("/")
        self._user_name = user_name
        self._api_key = api_key

    def close(self) -> None:
        self._session.close()

    def _build_url(self, path: str) -> str:
        return f"{self._api_url}{path}"

    def _auth_headers(self) -> dict[str, str]:
        "Returns the authentication header to add to a request, if credentials are available."

        if self._user_name and self._user_name.strip() and self._api_key and self._api_key.strip():
            return {"Authorization": basic_auth_header(self._user_name, self._api_key)}
        else:
            return {}

    def _send(self, what: str, url: str, headers: dict[str, str], **kwargs: Any) -> requests.Response:
        "Sends a POST request, and checks that Confluence has accepted it."

        headers.update(self._auth_headers())
        try:
            response = self._session.post(url, headers=headers, **kwargs)
        except requests.RequestException as ex:
            raise RemoteRequestError(f"request could not be sent to {url}: {ex}") from ex

        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        if response.status_code != 200:
            response.close()
            raise RemoteResponseError(f"error while {what}", status_code=response.status_code, reason=response.reason)
        return response

    def create_page(self, space_key: str, title: str, content: str, *, parent_id: str | None = None) -> str:
        """
        Creates a new page via Confluence API.

        :param space_key: Confluence space key.
        :param title: Page title.
        :param content: Page body in Confluence Storage Format.
        :param parent_id: Confluence page ID of the parent page. Blank to create a page without an ancestor.
        :returns: Confluence page ID of the newly created page.
        """

        LOGGER.info("Creating page: %s", title)

        request = ConfluenceCreatePageRequest(
            type=ConfluenceContentType.PAGE,
            title=title,
            space=ConfluenceSpace(key=space_key),
            body=ConfluencePageBody(
                storage=ConfluencePageStorage(
                    value=content,
                    representation=ConfluenceRepresentation.STORAGE,
                )
            ),
            ancestors=[ConfluenceAncestor(id=parent_id)] if parent_id and parent_id.strip() else [],
        )

        response = self._send(
            "creating page",
            self._build_url("/content"),
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            data=object_to_json_payload(request),
        )
        try:
            try:
                data = response.json()
            except requests.JSONDecodeError as ex:
                raise RemoteResponseError(
                    "could not read JSON response for new page", status_code=response.status_code, reason=response.reason
                ) from ex

            page_id = data.get("id") if isinstance(data, dict) else None
            if not isinstance(page_id, str) or not page_id:
                raise RemoteResponseError(
                    "no content ID in response for new page", status_code=response.status_code, reason=response.reason
                )
        finally:
            response.close()

        LOGGER.debug("Created page with ID: %s", page_id)
        return page_id

    def upload_attachment(self, page_id: str, attachment_path: Path) -> None:
        """
        Uploads a new attachment to a Confluence page.

        :param page_id: Confluence page ID.
        :param attachment_path: Path to the file to upload as an attachment.
        """

        content_type, _ = mimetypes.guess_type(attachment_path.name, strict=True)
        if content_type is None:
            content_type = "application/octet-stream"

        url = self._build_url(f"/content/{page_id}/child/attachment")

        try:
            attachment_file = open(attachment_path, "rb")
        except OSError as ex:
            raise ContentReadError(attachment_path, f"could not read attachment file: {attachment_path}") from ex

        with attachment_file:
            LOGGER.info("Uploading attachment: %s", attachment_path.name)
            response = self._send(
                "uploading attachment",
                url,
                {
                    "X-Atlassian-Token": "no-check",
                    "Accept": "application/json",
                },
                files={"file": (attachment_path.name, attachment_file, content_type)},
            )
        response.close()
