#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/model.py
"""Document model produced by the converter and consumed by the serializer.

The model is deliberately flat: a ``Document`` is an ordered sequence of
``Paragraph`` blocks, and each paragraph holds inline ``Run`` and
``HyperlinkRun`` children. Nesting that exists in the HTML (lists inside
lists, quotes inside quotes) is expressed through paragraph attributes:
list level, heading level and left indent.

Node Hierarchy
--------------
- Document
    - Paragraph
        - Run
        - HyperlinkRun

All nodes support the visitor pattern through ``accept``.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union

from richdocx.constants import (
    BULLET_LEVEL_TEXTS,
    DEFAULT_DESCRIPTION,
    DEFAULT_HYPERLINK_COLOR,
    HYPERLINK_STYLE_NAME,
    NUMBERED_LEVEL_TEXTS,
)


class Alignment(str, Enum):
    """Paragraph alignment derived from an inline ``text-align``."""

    START = "start"
    CENTER = "center"
    END = "end"
    JUSTIFY = "justify"


class ListKind(str, Enum):
    """List classification of a paragraph."""

    BULLETED = "bulleted"
    NUMBERED = "numbered"


@dataclass(frozen=True)
class RunStyle:
    """Inline style accumulated while walking down the HTML tree.

    Instances are immutable; each nesting level derives a new value with
    ``with_bold``/``with_italic``/``with_size`` so sibling branches never
    see each other's formatting.

    Parameters
    ----------
    bold : bool, default False
    italic : bool, default False
    size : int or None, default None
        Font size in whole points; None leaves the consumer's default.

    """

    bold: bool = False
    italic: bool = False
    size: int | None = None

    def with_bold(self) -> RunStyle:
        return self if self.bold else replace(self, bold=True)

    def with_italic(self) -> RunStyle:
        return self if self.italic else replace(self, italic=True)

    def with_size(self, size: int | None) -> RunStyle:
        if size is None or size == self.size:
            return self
        return replace(self, size=size)


@dataclass(frozen=True)
class ListInfo:
    """Bulleted or numbered classification with a zero-based nesting level."""

    kind: ListKind
    level: int = 0

    def __post_init__(self) -> None:
        if self.level < 0:
            raise ValueError(f"list level must be non-negative, got {self.level}")


class Node(ABC):
    """Base class for all model nodes."""

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Dispatch to the matching ``visit_*`` method of ``visitor``."""


@dataclass(frozen=True)
class Run(Node):
    """A contiguous span of text sharing one style."""

    text: str
    bold: bool = False
    italic: bool = False
    size: int | None = None

    @classmethod
    def styled(cls, text: str, style: RunStyle) -> Run:
        return cls(text=text, bold=style.bold, italic=style.italic, size=style.size)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_run(self)


@dataclass(frozen=True)
class HyperlinkRun(Node):
    """Link text pointing at an absolute http(s) URL.

    Hyperlink runs are rendered with the document's hyperlink style and
    never carry bold or italic formatting of their own.
    """

    text: str
    url: str
    size: int | None = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_hyperlink_run(self)


InlineNode = Union[Run, HyperlinkRun]


@dataclass
class Paragraph(Node):
    """Block-level unit of the document.

    Parameters
    ----------
    children : list of Run or HyperlinkRun
        Inline content in document order
    heading : int or None
        Heading level 1-3. A list paragraph may also carry a heading level.
    alignment : Alignment or None
        Explicit alignment; None keeps the style default
    indent : int or None
        Left indent in twentieths of a point; None when not indented
    list_info : ListInfo or None
        Bulleted/numbered classification; None for ordinary paragraphs

    """

    children: list[InlineNode] = field(default_factory=list)
    heading: int | None = None
    alignment: Alignment | None = None
    indent: int | None = None
    list_info: ListInfo | None = None

    def __post_init__(self) -> None:
        if self.heading is not None and not 1 <= self.heading <= 3:
            raise ValueError(f"heading level must be between 1 and 3, got {self.heading}")

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_paragraph(self)


@dataclass(frozen=True)
class NumberingDefinition:
    """Multi-level list format shared by every list of one kind."""

    kind: ListKind
    level_texts: tuple[str, ...]

    @property
    def max_level(self) -> int:
        return len(self.level_texts) - 1

    def level_for(self, level: int) -> int:
        """Map a nesting level onto a defined level; deeper lists reuse the last one."""
        return min(max(level, 0), self.max_level)


@dataclass(frozen=True)
class HyperlinkStyle:
    """Named character style applied to every hyperlink run."""

    name: str = HYPERLINK_STYLE_NAME
    color: str = DEFAULT_HYPERLINK_COLOR
    underline: bool = True


def default_numbering() -> tuple[NumberingDefinition, NumberingDefinition]:
    return (
        NumberingDefinition(ListKind.NUMBERED, NUMBERED_LEVEL_TEXTS),
        NumberingDefinition(ListKind.BULLETED, BULLET_LEVEL_TEXTS),
    )


@dataclass
class Document(Node):
    """Top-level container handed to the serializer.

    A new ``Document`` is built for every export; nothing is shared between
    exports.
    """

    creator: str
    title: str
    paragraphs: list[Paragraph] = field(default_factory=list)
    description: str = DEFAULT_DESCRIPTION
    numbering: tuple[NumberingDefinition, ...] = field(default_factory=default_numbering)
    hyperlink_style: HyperlinkStyle = field(default_factory=HyperlinkStyle)

    def numbering_for(self, kind: ListKind) -> NumberingDefinition:
        for definition in self.numbering:
            if definition.kind is kind:
                return definition
        raise KeyError(f"no numbering definition for {kind.value} lists")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_document(self)


class ModelVisitor(ABC):
    """Base class for visitors over the document model."""

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph."""

    @abstractmethod
    def visit_run(self, node: Run) -> Any:
        """Visit a Run."""

    @abstractmethod
    def visit_hyperlink_run(self, node: HyperlinkRun) -> Any:
        """Visit a HyperlinkRun."""
