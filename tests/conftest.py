"""
Shared fixtures for the tree-clusters test suite.

Provides:
- A BeautifulSoup navigator
- Small parsed documents with hand-checked distances
"""

from pathlib import Path

import pytest

from tree_clusters.navigation.soup import SoupNavigator, parse_document

# Three adjacent paragraphs and a span in a neighboring section.
ARTICLE_HTML = (
    "<body>"
    "<div><p>one</p><p>two</p><p>three</p></div>"
    "<section><span>elsewhere</span></section>"
    "</body>"
)

# Paths of different depths with stride nodes at several levels.
UNEVEN_HTML = (
    "<body>"
    "<div><p>a</p></div>"
    "<em>b</em>"
    "<section><b>z</b><span>q<i>c</i></span></section>"
    "</body>"
)


@pytest.fixture
def navigator() -> SoupNavigator:
    """Create a BeautifulSoup navigator."""
    return SoupNavigator()


@pytest.fixture
def article():
    """Parse the article document."""
    return parse_document(ARTICLE_HTML)


@pytest.fixture
def article_nodes(article):
    """Return (p1, p2, p3, span) from the article document."""
    p1, p2, p3 = article.find_all("p")
    return p1, p2, p3, article.find("span")


@pytest.fixture
def uneven():
    """Parse the uneven-depth document."""
    return parse_document(UNEVEN_HTML)


@pytest.fixture
def article_file(tmp_path: Path) -> Path:
    """Write the article document to disk."""
    path = tmp_path / "article.html"
    path.write_text(ARTICLE_HTML, encoding="utf-8")
    return path
