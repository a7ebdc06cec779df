"""
Publish a tree of pages to Confluence wiki.

Reads a metadata file that describes a hierarchy of pages with attachments, and invokes Confluence API endpoints
to create each page under its parent and upload its attachments.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import argparse
import logging
import os.path
import sys
import typing
from pathlib import Path
from typing import Any, Sequence

from . import __version__
from .environment import ArgumentError, ConfluenceConnectionProperties, PublisherError
from .metadata import iter_pages


class Arguments(argparse.Namespace):
    metadata: Path
    api_url: str | None
    domain: str | None
    path: str | None
    username: str | None
    api_key: str | None
    headers: dict[str, str] | None
    loglevel: str


class KwargsAppendAction(argparse.Action):
    """Append key-value pairs to a dictionary."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: None | str | Sequence[Any],
        option_string: str | None = None,
    ) -> None:
        try:
            d = dict(map(lambda x: x.split("=", 1), typing.cast(Sequence[str], values)))
        except ValueError:
            raise argparse.ArgumentError(
                self,
                f'Could not parse argument "{values}". It should follow the format: k1=v1 k2=v2 ...',
            ) from None
        setattr(namespace, self.dest, d)


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.prog = os.path.basename(os.path.dirname(__file__))
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("metadata", help="Path to the JSON or YAML metadata file that describes the page tree.")
    parser.add_argument(
        "--api-url",
        dest="api_url",
        help="Confluence REST API endpoint (e.g. 'https://example.atlassian.net/wiki/rest/api').",
    )
    parser.add_argument("-d", "--domain", help="Confluence organization domain, used when no API URL is given.")
    parser.add_argument("-p", "--path", help="Base path for Confluence (default: '/wiki/').")
    parser.add_argument("-u", "--username", help="Confluence user name.")
    parser.add_argument(
        "-a",
        "--api-key",
        dest="api_key",
        help="Confluence API key or password. Requests are not authenticated unless both user name and API key are set.",
    )
    parser.add_argument(
        "--headers",
        nargs="+",
        required=False,
        action=KwargsAppendAction,
        metavar="KEY=VALUE",
        help="Apply custom headers to all Confluence API requests.",
    )
    parser.add_argument(
        "-l",
        "--loglevel",
        choices=[
            logging.getLevelName(level).lower()
            for level in (
                logging.DEBUG,
                logging.INFO,
                logging.WARN,
                logging.ERROR,
                logging.CRITICAL,
            )
        ],
        default=logging.getLevelName(logging.INFO).lower(),
        help="Use this option to set the log verbosity.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = get_parser()
    args = Arguments()
    parser.parse_args(argv, namespace=args)

    args.metadata = Path(args.metadata)

    logging.basicConfig(
        level=getattr(logging, args.loglevel.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
    )

    from .api import ConfluenceAPI
    from .publisher import Publisher

    try:
        properties = ConfluenceConnectionProperties(
            api_url=args.api_url,
            domain=args.domain,
            base_path=args.path,
            user_name=args.username,
            api_key=args.api_key,
            headers=args.headers,
        )
    except ArgumentError as e:
        parser.error(str(e))

    try:
        with ConfluenceAPI(properties) as api:
            publisher = Publisher(api, args.metadata)

            pages = [page for _, page in iter_pages(publisher.metadata.pages)]
            logging.info(
                "Publishing %d page(s) with %d attachment(s) to space %s",
                len(pages),
                sum(len(page.attachments) for page in pages),
                publisher.metadata.spaceKey,
            )

            publisher.publish()
    except PublisherError as err:
        logging.error(err)
        if err.__cause__ is not None:
            logging.error(err.__cause__)
        sys.exit(1)


if __name__ == "__main__":
    main()
