"""Table-of-contents parsing for tutorial projects.

A SUMMARY.md may be either structured data (YAML or JSON, optionally
wrapped in ``---`` separator lines) or a GitBook-style markdown outline:

    # Getting Started
    * [Install](en-US/install.md)
    - [Configure](en-US/configure.md)

Both stages produce the same tree: an ordered mapping from language code to
a list of category entries. A category entry is either a
``CategoryContainer`` holding leaf entries or a ``CategoryLeaf`` that is
itself importable.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import yaml

from kbimport.config import DEFAULT_CATEGORY, DEFAULT_LANGUAGE, DEFAULT_TITLE

logger = logging.getLogger(__name__)

_SEPARATOR_LINE = re.compile(r"^[ \t]*---[ \t\r]*$", re.MULTILINE)
_HEADING = re.compile(r"^#+\s+(.+)$")
_BULLET_LINK = re.compile(r"^[*\-]\s+\[(.*?)\]\((.*?)\)")
_LANGUAGE_CODE = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")


class _SummaryLoader(yaml.SafeLoader):
    """Safe loader with YAML 1.2 booleans.

    Only true/false resolve to bool, so language keys like ``no`` and titles
    like ``Yes`` stay strings.
    """


_BOOL_TAG = "tag:yaml.org,2002:bool"
_SummaryLoader.yaml_implicit_resolvers = {
    first: [resolver for resolver in resolvers if resolver[0] != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_SummaryLoader.add_implicit_resolver(
    _BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF")
)


@dataclass(frozen=True)
class LeafEntry:
    """A single importable file: title plus root-relative path."""

    title: str
    path: Optional[str]


@dataclass
class CategoryContainer:
    """A category grouping leaf entries."""

    title: str
    items: List[LeafEntry] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryLeaf:
    """A top-level entry that points at a file directly.

    ``category`` is the name the record is filed under; ``entry`` is the
    file to import.
    """

    category: str
    entry: LeafEntry


CategoryEntry = Union[CategoryContainer, CategoryLeaf]
SummaryTree = Dict[str, List[CategoryEntry]]


class SummaryFormat(Enum):
    """Which parsing stage produced a tree."""

    STRUCTURED = "structured"
    OUTLINE = "outline"


@dataclass
class StageResult:
    """Outcome of one parsing stage. ``tree`` is None when the stage failed."""

    tree: Optional[SummaryTree] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.tree is not None


@dataclass
class ParsedSummary:
    tree: SummaryTree
    format: SummaryFormat

    @property
    def languages(self) -> List[str]:
        return list(self.tree.keys())


def parse_summary(
    content: str,
    default_language: str = DEFAULT_LANGUAGE,
    default_category: str = DEFAULT_CATEGORY,
    default_title: str = DEFAULT_TITLE,
) -> ParsedSummary:
    """Parse table-of-contents text, structured data first, outline second."""
    structured = parse_structured(
        content, default_category=default_category, default_title=default_title
    )
    if structured.ok:
        return ParsedSummary(tree=structured.tree, format=SummaryFormat.STRUCTURED)

    logger.debug("Structured parse rejected (%s), using outline parser", structured.error)
    return ParsedSummary(
        tree=parse_outline(
            content, default_language=default_language, default_category=default_category
        ),
        format=SummaryFormat.OUTLINE,
    )


# === Structured data ===


def parse_structured(
    content: str,
    default_category: str = DEFAULT_CATEGORY,
    default_title: str = DEFAULT_TITLE,
) -> StageResult:
    """Parse content as a YAML/JSON mapping of language -> categories.

    Separator lines (``---``) are removed first. Anything other than a
    non-empty mapping is reported as a failed stage.
    """
    stripped = _SEPARATOR_LINE.sub("", content)
    try:
        data = yaml.load(stripped, Loader=_SummaryLoader)
    except yaml.YAMLError as e:
        return StageResult(error=f"invalid structured data: {e}")

    if not isinstance(data, dict) or not data:
        return StageResult(error=f"expected a non-empty mapping, got {type(data).__name__}")

    tree: SummaryTree = {}
    for language, categories in data.items():
        if not isinstance(categories, list):
            logger.debug("Skipping language %r: categories are not a list", language)
            continue
        tree[str(language)] = [
            entry
            for entry in (
                _to_category_entry(c, default_category, default_title) for c in categories
            )
            if entry is not None
        ]
    return StageResult(tree=tree)


def _to_category_entry(
    data: Any, default_category: str, default_title: str
) -> Optional[CategoryEntry]:
    if not isinstance(data, dict):
        return None

    title = _text(data.get("title"))
    sub_items = data.get("subItems")
    if isinstance(sub_items, list):
        return CategoryContainer(
            title=default_category if title is None else title,
            items=[_to_leaf(item, default_title) for item in sub_items if isinstance(item, dict)],
        )
    if data.get("path") is not None:
        return CategoryLeaf(
            category=default_category if title is None else title,
            entry=_to_leaf(data, default_title),
        )

    logger.debug("Skipping category %r: no subItems and no path", title)
    return None


def _to_leaf(data: Dict[str, Any], default_title: str) -> LeafEntry:
    title = _text(data.get("title"))
    return LeafEntry(
        title=default_title if title is None else title, path=_text(data.get("path"))
    )


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


# === Markdown outline ===


@dataclass(frozen=True)
class _OutlineState:
    """Fold state for the outline scan."""

    language: str
    category: str


def parse_outline(
    content: str,
    default_language: str = DEFAULT_LANGUAGE,
    default_category: str = DEFAULT_CATEGORY,
) -> SummaryTree:
    """Parse a heading/bullet outline into a summary tree.

    Headings set the current category. Bullet links become leaf entries in
    that category, under the language named by the first path segment when
    it looks like a language code, otherwise under the current language.
    Categories with the same title in one language are merged.
    """
    tree: SummaryTree = {}
    state = _OutlineState(language=default_language, category=default_category)

    for raw_line in content.split("\n"):
        state = _scan_line(raw_line.strip(), state, tree)

    return tree


def _scan_line(line: str, state: _OutlineState, tree: SummaryTree) -> _OutlineState:
    if not line:
        return state

    heading = _HEADING.match(line)
    if heading:
        return _OutlineState(language=state.language, category=heading.group(1).strip())

    bullet = _BULLET_LINK.match(line)
    if bullet:
        title, path = bullet.group(1), bullet.group(2)
        language = detect_language(path) or state.language
        container = _find_or_add_category(tree.setdefault(language, []), state.category)
        container.items.append(LeafEntry(title=title, path=path))

    return state


def detect_language(path: str) -> Optional[str]:
    """Return the first path segment if it looks like a language code."""
    first = path.split("/")[0]
    if _LANGUAGE_CODE.match(first):
        return first
    return None


def _find_or_add_category(categories: List[CategoryEntry], title: str) -> CategoryContainer:
    for entry in categories:
        if isinstance(entry, CategoryContainer) and entry.title == title:
            return entry
    container = CategoryContainer(title=title)
    categories.append(container)
    return container
