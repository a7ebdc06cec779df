"""
Publish a tree of pages to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from cattrs import BaseValidationError

from .environment import ConfigurationError
from .serializer import JsonType, json_payload_to_object, json_to_object

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfluencePageNode:
    """
    A page to create in Confluence, with its attachments and child pages.

    :param title: Title of the Confluence page.
    :param contentFilePath: Path to the file with the page body in Confluence Storage Format, relative to the content root.
    :param attachments: Paths to files to attach to the page, relative to the content root.
    :param children: Pages to create under this page, in publishing order.
    """

    title: str
    contentFilePath: str
    attachments: list[str] = field(default_factory=list)
    children: list[ConfluencePageNode] = field(default_factory=list)


@dataclass(frozen=True)
class ConfluencePublisherMetadata:
    """
    Describes a tree of pages to publish to Confluence.

    :param spaceKey: Confluence space key for new pages (e.g. `~hunyadi` or `INST`).
    :param pages: Top-level pages, in publishing order.
    :param parentContentId: Confluence page ID under which top-level pages are created. Blank to create top-level
        pages without an ancestor.
    """

    spaceKey: str
    pages: list[ConfluencePageNode] = field(default_factory=list)
    parentContentId: str | None = None


def _parse_metadata(path: Path, text: str) -> ConfluencePublisherMetadata:
    if path.suffix.lower() in (".yaml", ".yml"):
        data: JsonType = yaml.safe_load(text)
        return json_to_object(ConfluencePublisherMetadata, data)
    else:
        return json_payload_to_object(ConfluencePublisherMetadata, text)


def load_metadata(path: Path) -> ConfluencePublisherMetadata:
    """
    Reads the description of a page tree from a JSON or YAML file.

    :param path: Path to the metadata file. Files with extension `.yaml` or `.yml` are parsed as YAML, others as JSON.
    :returns: Metadata describing the page tree.
    :raises ConfigurationError: Raised when the file cannot be read or does not match the expected structure.
    """

    LOGGER.info("Reading metadata: %s", path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as ex:
        raise ConfigurationError(f"could not read metadata file: {path}") from ex

    try:
        metadata = _parse_metadata(path, text)
    except (BaseValidationError, yaml.YAMLError, KeyError, TypeError, ValueError) as ex:
        raise ConfigurationError(f"could not parse metadata file: {path}") from ex

    if not metadata.spaceKey.strip():
        raise ConfigurationError(f"space key not specified in metadata file: {path}")

    return metadata


def iter_pages(pages: Iterable[ConfluencePageNode], depth: int = 0) -> Iterator[tuple[int, ConfluencePageNode]]:
    "Enumerates pages in the order they are published (depth-first, parent before children)."

    for page in pages:
        yield depth, page
        yield from iter_pages(page.children, depth + 1)
