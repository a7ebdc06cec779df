"""
Publish a tree of pages to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from tests.utility import TypedTestCase, write_files
from tree2conf.environment import ConfigurationError
from tree2conf.metadata import ConfluencePageNode, ConfluencePublisherMetadata, iter_pages, load_metadata

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
)

METADATA_JSON = """
{
    "spaceKey": "DOC",
    "parentContentId": "4711",
    "pages": [
        {
            "title": "Getting started",
            "contentFilePath": "getting-started.xhtml",
            "attachments": ["images/overview.png", "files/sample.zip"],
            "children": [
                {"title": "Installation", "contentFilePath": "installation.xhtml"},
                {"title": "Configuration", "contentFilePath": "configuration.xhtml"}
            ]
        },
        {"title": "Reference", "contentFilePath": "reference.xhtml", "attachments": [], "children": []}
    ]
}
"""

METADATA_YAML = """
spaceKey: DOC
pages:
  - title: Getting started
    contentFilePath: getting-started.xhtml
    attachments:
      - images/overview.png
    children:
      - title: Installation
        contentFilePath: installation.xhtml
"""


class TestMetadata(TypedTestCase):
    tmp_dir: TemporaryDirectory[str]
    root: Path

    def setUp(self) -> None:
        self.tmp_dir = TemporaryDirectory()
        self.root = Path(self.tmp_dir.name)

    def tearDown(self) -> None:
        self.tmp_dir.cleanup()

    def test_load_json(self) -> None:
        write_files(self.root, {"metadata.json": METADATA_JSON})
        metadata = load_metadata(self.root / "metadata.json")

        self.assertEqual(metadata.spaceKey, "DOC")
        self.assertEqual(metadata.parentContentId, "4711")
        self.assertListEqual([page.title for page in metadata.pages], ["Getting started", "Reference"])

        first = metadata.pages[0]
        self.assertEqual(first.contentFilePath, "getting-started.xhtml")
        self.assertListEqual(first.attachments, ["images/overview.png", "files/sample.zip"])
        self.assertListEqual(
            first.children,
            [
                ConfluencePageNode(title="Installation", contentFilePath="installation.xhtml"),
                ConfluencePageNode(title="Configuration", contentFilePath="configuration.xhtml"),
            ],
        )
        self.assertListEqual(metadata.pages[1].children, [])

    def test_load_yaml(self) -> None:
        write_files(self.root, {"metadata.yaml": METADATA_YAML})
        metadata = load_metadata(self.root / "metadata.yaml")

        self.assertEqual(metadata.spaceKey, "DOC")
        self.assertIsNone(metadata.parentContentId)
        self.assertEqual(len(metadata.pages), 1)
        self.assertListEqual(metadata.pages[0].attachments, ["images/overview.png"])
        self.assertEqual(metadata.pages[0].children[0].title, "Installation")

    def test_missing_file(self) -> None:
        with self.assertRaises(ConfigurationError):
            load_metadata(self.root / "missing.json")

    def test_malformed_json(self) -> None:
        write_files(self.root, {"metadata.json": '{"spaceKey": "DOC", "pages": ['})
        with self.assertRaises(ConfigurationError):
            load_metadata(self.root / "metadata.json")

    def test_malformed_yaml(self) -> None:
        write_files(self.root, {"metadata.yml": "spaceKey: [DOC\npages: {"})
        with self.assertRaises(ConfigurationError):
            load_metadata(self.root / "metadata.yml")

    def test_missing_required_field(self) -> None:
        write_files(self.root, {"metadata.json": '{"spaceKey": "DOC", "pages": [{"title": "No content"}]}'})
        with self.assertRaises(ConfigurationError):
            load_metadata(self.root / "metadata.json")

    def test_missing_space_key(self) -> None:
        write_files(self.root, {"metadata.json": '{"pages": []}'})
        with self.assertRaises(ConfigurationError):
            load_metadata(self.root / "metadata.json")

    def test_blank_space_key(self) -> None:
        write_files(self.root, {"metadata.json": '{"spaceKey": "  ", "pages": []}'})
        with self.assertRaises(ConfigurationError):
            load_metadata(self.root / "metadata.json")

    def test_not_an_object(self) -> None:
        write_files(self.root, {"metadata.json": '["DOC"]'})
        with self.assertRaises(ConfigurationError):
            load_metadata(self.root / "metadata.json")

    def test_invalid_values(self) -> None:
        documents = {
            "null space key": '{"spaceKey": null, "pages": []}',
            "numeric space key": '{"spaceKey": 42, "pages": []}',
            "null title": '{"spaceKey": "DOC", "pages": [{"title": null, "contentFilePath": "a.xhtml"}]}',
            "null content file": '{"spaceKey": "DOC", "pages": [{"title": "A", "contentFilePath": null}]}',
            "string attachments": '{"spaceKey": "DOC", "pages": [{"title": "A", "contentFilePath": "a.xhtml", "attachments": "img.png"}]}',
            "object pages": '{"spaceKey": "DOC", "pages": {"title": "A"}}',
            "numeric parent": '{"spaceKey": "DOC", "parentContentId": 4711, "pages": []}',
        }
        for name, document in documents.items():
            with self.subTest(name=name):
                write_files(self.root, {"metadata.json": document})
                with self.assertRaises(ConfigurationError):
                    load_metadata(self.root / "metadata.json")

    def test_load_nested(self) -> None:
        document = """
spaceKey: DOC
parentContentId: ""
pages:
  - title: Guide
    contentFilePath: guide.xhtml
    children:
      - title: Chapter 1
        contentFilePath: guide/chapter-1.xhtml
        attachments: [guide/figure.png]
        children:
          - title: Section 1.1
            contentFilePath: guide/section-1-1.xhtml
          - title: Section 1.2
            contentFilePath: guide/section-1-2.xhtml
      - title: Chapter 2
        contentFilePath: guide/chapter-2.xhtml
  - title: Appendix
    contentFilePath: appendix.xhtml
"""
        write_files(self.root, {"metadata.yaml": document})
        metadata = load_metadata(self.root / "metadata.yaml")

        self.assertEqual(metadata.parentContentId, "")
        self.assertListEqual(
            [(depth, page.title) for depth, page in iter_pages(metadata.pages)],
            [(0, "Guide"), (1, "Chapter 1"), (2, "Section 1.1"), (2, "Section 1.2"), (1, "Chapter 2"), (0, "Appendix")],
        )
        chapter = metadata.pages[0].children[0]
        self.assertListEqual(chapter.attachments, ["guide/figure.png"])
        self.assertEqual(chapter.children[1].contentFilePath, "guide/section-1-2.xhtml")

    def test_iter_pages(self) -> None:
        metadata = ConfluencePublisherMetadata(
            spaceKey="DOC",
            pages=[
                ConfluencePageNode(
                    title="A",
                    contentFilePath="a.xhtml",
                    children=[
                        ConfluencePageNode(
                            title="A1",
                            contentFilePath="a1.xhtml",
                            children=[ConfluencePageNode(title="A1a", contentFilePath="a1a.xhtml")],
                        ),
                        ConfluencePageNode(title="A2", contentFilePath="a2.xhtml"),
                    ],
                ),
                ConfluencePageNode(title="B", contentFilePath="b.xhtml"),
            ],
        )
        self.assertListEqual(
            [(depth, page.title) for depth, page in iter_pages(metadata.pages)],
            [(0, "A"), (1, "A1"), (2, "A1a"), (1, "A2"), (0, "B")],
        )


if __name__ == "__main__":
    unittest.main()
