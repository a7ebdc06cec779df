"""
Publish a tree of pages to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import enum
from dataclasses import dataclass, field


@enum.unique
class ConfluenceContentType(enum.Enum):
    PAGE = "page"


@enum.unique
class ConfluenceRepresentation(enum.Enum):
    STORAGE = "storage"


@dataclass(frozen=True)
class ConfluenceSpace:
    key: str


@dataclass(frozen=True)
class ConfluenceAncestor:
    id: str


@dataclass(frozen=True)
class ConfluencePageStorage:
    """
    Holds Confluence page content.

    :param value: Body of the content, in the format found in the representation field.
    :param representation: Type of content representation used (e.g. Confluence Storage Format).
    """

    value: str
    representation: ConfluenceRepresentation


@dataclass(frozen=True)
class ConfluencePageBody:
    """
    Holds Confluence page content.

    :param storage: Encapsulates content with meta-information about its representation.
    """

    storage: ConfluencePageStorage


@dataclass(frozen=True)
class ConfluenceCreatePageRequest:
    """
    Payload of a REST API v1 request that creates a new page.

    :param type: Content type, always a page.
    :param title: Page title.
    :param space: Space the page is created in.
    :param body: Page content.
    :param ancestors: Parent page of the new page. When empty, the field is not serialized at all.
    """

    type: ConfluenceContentType
    title: str
    space: ConfluenceSpace
    body: ConfluencePageBody
    ancestors: list[ConfluenceAncestor] = field(default_factory=list)
