"""TreeNavigator over BeautifulSoup documents."""

from typing import Any

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Doctype, NavigableString, PreformattedString

from .base import TreeNavigator

DEFAULT_PARSER = "html.parser"

TEXT_TAG = "#text"
COMMENT_TAG = "#comment"
DOCTYPE_TAG = "#doctype"
OTHER_STRING_TAG = "#string"


def parse_document(markup: str | bytes, parser: str = DEFAULT_PARSER) -> BeautifulSoup:
    """Parse markup into a BeautifulSoup tree."""
    return BeautifulSoup(markup, parser)


class SoupNavigator(TreeNavigator):
    """Navigate the tags and strings of a BeautifulSoup tree.

    Every ``PageElement`` is a node: tags, text, comments. The
    ``BeautifulSoup`` object is the root. Only whitespace-only text is
    skippable; comments count as ordinary siblings.
    """

    def parent(self, node: Any) -> Any | None:
        return node.parent

    def next_sibling(self, node: Any) -> Any | None:
        return node.next_sibling

    def previous_sibling(self, node: Any) -> Any | None:
        return node.previous_sibling

    def tag_of(self, node: Any) -> str:
        if isinstance(node, Tag):
            return node.name
        if isinstance(node, Comment):
            return COMMENT_TAG
        if isinstance(node, Doctype):
            return DOCTYPE_TAG
        if isinstance(node, PreformattedString):
            return OTHER_STRING_TAG
        return TEXT_TAG

    def is_skippable(self, node: Any) -> bool:
        return (
            isinstance(node, NavigableString)
            and not isinstance(node, PreformattedString)
            and not node.strip()
        )
