"""
Publish a tree of pages to Confluence wiki.

Reads a metadata file that describes a hierarchy of pages with attachments, and invokes Confluence API endpoints
to create each page under its parent and upload its attachments.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

__author__ = "Levente Hunyadi"
__copyright__ = "Copyright 2022-2026, Levente Hunyadi"
__license__ = "MIT"
__maintainer__ = "Levente Hunyadi"
__status__ = "Production"
