"""Markdown-like document model produced from a documentation page.

All elements here should feel familiar if you know markdown. Documentation is written in markdown
before it is rendered to HTML, so it should be representable as such once parsed back.

Every type is an immutable value. Sequence fields are normalized to tuples on construction so a
block built from lists compares (and hashes) equal to one built from tuples.
"""

from __future__ import annotations

import dataclasses as dc
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple, Type, Union

from typing_extensions import TypeAlias

from docuparse.documents.language import Language

RGB: TypeAlias = "tuple[int, int, int]"


def _freeze(obj: Any, name: str, value: Iterable[Any]) -> None:
    """Set field `name` of frozen dataclass `obj` to `value` as a tuple."""
    object.__setattr__(obj, name, tuple(value))


# ------------------------------------------------------------------------------------------------
# TEXT RUNS
# ------------------------------------------------------------------------------------------------


@dc.dataclass(frozen=True)
class TextStyle:
    """Style of a text run.

    Each flag is independently optional. `None` means "unspecified" (inherit whatever the renderer
    would use), while `True` or `False` is an explicit override.
    """

    bold: Optional[bool] = None
    # -- inline code, like `markdown` --
    code: Optional[bool] = None
    italic: Optional[bool] = None
    strike_through: Optional[bool] = None
    underline: Optional[bool] = None
    foreground_rgb: Optional[RGB] = None
    background_rgb: Optional[RGB] = None

    def __post_init__(self):
        for name in ("foreground_rgb", "background_rgb"):
            if (rgb := getattr(self, name)) is not None:
                _freeze(self, name, rgb)

    def __repr__(self) -> str:
        # -- a style is mostly unspecified fields; showing them makes big diffs unreadable --
        specified = (
            f"{f.name}={getattr(self, f.name)!r}"
            for f in dc.fields(self)
            if getattr(self, f.name) is not None
        )
        return f"TextStyle({', '.join(specified)})"

    def overridden_by(self, other: TextStyle) -> TextStyle:
        """A new style with the specified fields of `other` replacing those of this style."""
        overrides = {
            f.name: getattr(other, f.name)
            for f in dc.fields(other)
            if getattr(other, f.name) is not None
        }
        return dc.replace(self, **overrides)


@dc.dataclass(frozen=True)
class TextAtomic:
    """A contiguous piece of styled text with an optional hyperlink target.

    For example "a <code>b</code> c" consists of three text atomics: "a ", "b" with code style,
    and " c".
    """

    text: str
    style: TextStyle = dc.field(default_factory=TextStyle)
    url: Optional[str] = None

    @classmethod
    def simple(cls, text: str) -> TextAtomic:
        """A run of `text` with no style overrides and no link."""
        return cls(text)

    def with_url(self, url: Optional[str]) -> TextAtomic:
        return dc.replace(self, url=url)


class TextAtomicBuilder:
    """Fluent construction of a `TextAtomic`, mostly useful when several style flags are set."""

    def __init__(self, text: str):
        self._text = text
        self._url: Optional[str] = None
        self._style: dict[str, Any] = {}

    def set_url(self, url: str) -> TextAtomicBuilder:
        self._url = url
        return self

    def bold(self, enabled: bool = True) -> TextAtomicBuilder:
        return self._set_style("bold", enabled)

    def code(self, enabled: bool = True) -> TextAtomicBuilder:
        return self._set_style("code", enabled)

    def italic(self, enabled: bool = True) -> TextAtomicBuilder:
        return self._set_style("italic", enabled)

    def strike_through(self, enabled: bool = True) -> TextAtomicBuilder:
        return self._set_style("strike_through", enabled)

    def underline(self, enabled: bool = True) -> TextAtomicBuilder:
        return self._set_style("underline", enabled)

    def foreground_rgb(self, r: int, g: int, b: int) -> TextAtomicBuilder:
        return self._set_style("foreground_rgb", (r, g, b))

    def background_rgb(self, r: int, g: int, b: int) -> TextAtomicBuilder:
        return self._set_style("background_rgb", (r, g, b))

    def build(self) -> TextAtomic:
        return TextAtomic(self._text, TextStyle(**self._style), self._url)

    def _set_style(self, name: str, value: Any) -> TextAtomicBuilder:
        self._style[name] = value
        return self


def plain_text(atomics: Iterable[TextAtomic]) -> str:
    """The text of `atomics` concatenated, style and links discarded."""
    return "".join(a.text for a in atomics)


# ------------------------------------------------------------------------------------------------
# BLOCKS
# ------------------------------------------------------------------------------------------------


class BlockContainer:
    """Base class for block-level nodes, something which can not be embedded inline.

    For example a paragraph, a table, an image or a list.
    """


@dc.dataclass(frozen=True)
class TextBlock(BlockContainer):
    """A block holding a flat sequence of text runs."""

    atomics: Sequence[TextAtomic] = ()

    _items_field = "atomics"

    def __post_init__(self):
        _freeze(self, "atomics", self.atomics)


class Heading1(TextBlock):
    pass


class Heading2(TextBlock):
    pass


class Heading3(TextBlock):
    pass


class Heading4(TextBlock):
    """Heading of level four or deeper; levels 5 and 6 fold into this one."""


class Paragraph(TextBlock):
    """Simple text without newlines."""


@dc.dataclass(frozen=True)
class Quote(BlockContainer):
    """Multi-paragraph quote."""

    blocks: Sequence[BlockContainer] = ()

    _items_field = "blocks"

    def __post_init__(self):
        _freeze(self, "blocks", self.blocks)


@dc.dataclass(frozen=True)
class Code(BlockContainer):
    """Code block, not inline code.

    Inline styling is dropped in favor of formatting the entire code at once.
    """

    code: str
    language: Optional[Language] = None


@dc.dataclass(frozen=True)
class BulletPoints(BlockContainer):
    points: Sequence[BlockContainer] = ()
    # -- bullets, or 1. 2. 3. --
    enumerated: bool = False

    def __post_init__(self):
        _freeze(self, "points", self.points)


@dc.dataclass(frozen=True)
class Table(BlockContainer):
    """Sequence of rows; a row is a sequence of cells; a cell is a sequence of text runs."""

    rows: Sequence[Sequence[Sequence[TextAtomic]]] = ()

    def __post_init__(self):
        _freeze(self, "rows", (tuple(tuple(cell) for cell in row) for row in self.rows))


@dc.dataclass(frozen=True)
class Image(BlockContainer):
    """Not renderable in a terminal, but it has to be represented somehow anyway."""

    url: str
    alt: Optional[str] = None


_HEADINGS: Tuple[Type[TextBlock], ...] = (Heading1, Heading2, Heading3, Heading4)


def heading_for_level(level: int) -> Type[TextBlock]:
    """The heading block-class for an `<h1>`..`<h6>` level; levels 5 and 6 fold into level 4."""
    if not 1 <= level <= 6:
        raise ValueError(f"heading level must be between 1 and 6, got {level}")
    return _HEADINGS[min(level, 4) - 1]


def merge_blocks(
    a: BlockContainer, b: BlockContainer
) -> Union[Tuple[BlockContainer], Tuple[BlockContainer, BlockContainer]]:
    """Merge `b` onto the end of `a` when both are the same "listy" variant.

    Produces a 1-tuple holding the merged block when `a` and `b` are both headings of the same
    level, both paragraphs, or both quotes. Any other pairing produces `(a, b)` unchanged.
    """
    if type(a) is not type(b) or not isinstance(a, (TextBlock, Quote)):
        return (a, b)

    name = a._items_field
    return (dc.replace(a, **{name: (*getattr(a, name), *getattr(b, name))}),)


# ------------------------------------------------------------------------------------------------
# CONTENT
# ------------------------------------------------------------------------------------------------


@dc.dataclass(frozen=True)
class Content:
    """Ordered sequence of blocks in reading order, basically the abstraction of a markdown page."""

    blocks: Sequence[BlockContainer] = ()

    def __post_init__(self):
        _freeze(self, "blocks", self.blocks)

    def __iter__(self) -> Iterator[BlockContainer]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)
