"""
Publish a tree of pages to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
from pathlib import Path

from .api import ConfluenceSession
from .environment import ContentReadError
from .metadata import ConfluencePageNode, ConfluencePublisherMetadata, load_metadata

LOGGER = logging.getLogger(__name__)


class Publisher:
    """
    Creates a tree of pages with attachments in Confluence, as described by a metadata file.

    Pages are created depth-first, each parent before its children, and the attachments of a page are uploaded
    right after the page itself. The first error aborts publishing; content created up to that point is kept.
    Every invocation creates new pages, even if a page with the same title already exists.
    """

    api: ConfluenceSession
    content_root: Path

    _metadata: ConfluencePublisherMetadata

    def __init__(self, api: ConfluenceSession, metadata_path: Path) -> None:
        """
        Initializes a new publisher instance.

        :param api: Holds information about an open session to a Confluence server.
        :param metadata_path: Metadata file that describes the page tree. Paths in the file are relative to the
            directory that contains the file.
        """

        self.api = api
        self._metadata = load_metadata(metadata_path)
        self.content_root = metadata_path.absolute().parent

    @property
    def metadata(self) -> ConfluencePublisherMetadata:
        "Describes the page tree to publish."

        return self._metadata

    def publish(self) -> None:
        "Creates all pages and uploads their attachments."

        self._publish_tree(self._metadata.pages, self._metadata.parentContentId)

    def _publish_tree(self, pages: list[ConfluencePageNode], parent_id: str | None) -> None:
        for page in pages:
            content = self._read_content(self.content_root / page.contentFilePath)
            page_id = self.api.create_page(self._metadata.spaceKey, page.title, content, parent_id=parent_id)

            for attachment in page.attachments:
                self.api.upload_attachment(page_id, self.content_root / attachment)

            self._publish_tree(page.children, page_id)

    def _read_content(self, path: Path) -> str:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as ex:
            raise ContentReadError(path, f"could not read page content file: {path}") from ex
