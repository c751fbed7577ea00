"""In-page anchor resolution for the active page.

Turns the page's level-2 heading texts into anchor entries and finds the
anchor that the scroll tracker currently reports as active.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypedDict

from docnav.core.slugger import Slugger
from docnav.core.types import ActiveAnchorSignal

ANCHOR_HEADING_DEPTH = 2


class AnchorEntryDict(TypedDict):
    """Dictionary representation of an anchor entry."""

    text: str
    slug: str


@dataclass(frozen=True)
class AnchorEntry:
    """Heading-derived link target within a page."""

    text: str
    slug: str

    def to_dict(self) -> AnchorEntryDict:
        """Convert to dictionary for JSON serialization."""
        return {"text": self.text, "slug": self.slug}


@dataclass(frozen=True)
class ResolvedAnchors:
    """Anchor entries of a page with the index of the active one."""

    entries: list[AnchorEntry]
    active_index: int


def heading_text(node: Mapping[str, Any]) -> str:
    """Concatenate the text of a heading descriptor and its descendants."""
    value = node.get("value")
    if isinstance(value, str):
        return value
    children = node.get("children") or []
    return "".join(heading_text(child) for child in children if isinstance(child, Mapping))


def extract_anchor_texts(headings: Iterable[Mapping[str, Any]]) -> list[str]:
    """Select the heading texts that become sidebar anchors.

    Only depth-2 ``heading`` descriptors with children are used; headings
    whose derived text is empty are dropped.

    Args:
        headings: Heading descriptors in document order, each a mapping with
            ``depth``, ``type`` and ``children`` keys

    Returns:
        Heading texts in document order
    """
    texts: list[str] = []
    for heading in headings:
        if heading.get("type") != "heading":
            continue
        if heading.get("depth") != ANCHOR_HEADING_DEPTH or not heading.get("children"):
            continue
        text = heading_text(heading)
        if text:
            texts.append(text)
    return texts


def resolve_anchors(
    heading_texts: Sequence[str],
    active_anchor: ActiveAnchorSignal | None = None,
) -> ResolvedAnchors:
    """Build anchor entries and locate the active anchor.

    All slugs are generated by one fresh Slugger so duplicates within the
    page are suffixed. When several anchors report active the last one wins;
    when none does, the first anchor is active.

    Args:
        heading_texts: Level-2 heading texts in document order
        active_anchor: Mapping of slug to ``{"isActive": bool}``

    Returns:
        ResolvedAnchors with entries and active index
    """
    signal = active_anchor or {}
    slugger = Slugger()
    entries: list[AnchorEntry] = []
    active_index = 0
    for i, text in enumerate(heading_texts):
        slug = slugger.slug(text)
        state = signal.get(slug)
        if isinstance(state, Mapping) and state.get("isActive"):
            active_index = i
        entries.append(AnchorEntry(text=text, slug=slug))
    return ResolvedAnchors(entries=entries, active_index=active_index)
