"""Tree navigation package.

Provides the navigator contract the clustering core consumes and an
adapter for BeautifulSoup documents.
"""

from .base import DocumentPosition, TreeNavigator
from .soup import SoupNavigator, parse_document

__all__ = [
    "DocumentPosition",
    "TreeNavigator",
    "SoupNavigator",
    "parse_document",
]
