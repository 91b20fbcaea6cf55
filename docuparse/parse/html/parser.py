# pyright: reportPrivateUsage=false

"""Provides the HTML-to-content converter used by `parse_html()`.

The converter is composed of `lxml` Custom Element Classes. The gist is you write a class like
`Heading` and then tell the `lxml` parser that all `<h1>`..`<h6>` elements should be instantiated
using that class. Any element without a registered class gets `DefaultElement`. The registry at the
bottom of this module is therefore the complete decision table from tag name to behavior; `lxml`
lower-cases HTML tag names so the lookup is case-insensitive.

CONVERSION

- _Conversion is bottom-up._ `.convert()` on an element converts its element children first
  (this is the only place recursion happens) and turns its text and the tails of its children into
  text runs. Those child results are classified into a _shape_ (see `shape.py`) and the element's
  class maps that shape to its own result: nothing, inline runs, table rows or a block sequence.

- _Links are inherited._ A text run takes its link from the nearest element at or above the
  element holding the text that has an `href` attribute.

- _Hidden elements contribute nothing._ An element carrying one of the hidden classes
  (`out-of-band` by default) is skipped along with its whole subtree, as if it were not there. Its
  tail is text of its parent and so is still converted.

- _Empty blocks are dropped._ A heading, paragraph, list, quote or table with no content produces
  no block at all.

The names "flow" and "phrasing" derive from the language of the HTML Standard. A flow element (like
`<div>` or `<p>`) forms a paragraph from inline content. A phrasing element (like `<a>` or `<span>`)
passes its runs up to the enclosing flow element unchanged.
"""

from __future__ import annotations

import dataclasses as dc
import itertools
from typing import Callable, Iterator, Optional, Sequence

from lxml import etree
from typing_extensions import TypeAlias

from docuparse.documents.content import (
    BlockContainer,
    BulletPoints,
    Code as CodeBlock,
    Image,
    Paragraph,
    Quote,
    Table,
    TextAtomic,
    TextStyle,
    heading_for_level,
    plain_text,
)
from docuparse.documents.language import Language
from docuparse.errors import InvalidHtmlError, RecursionLimitExceededError
from docuparse.logger import logger, trace_logger
from docuparse.parse.html.shape import (
    ROW_OUTSIDE_TABLE,
    AllInline,
    AllTableRows,
    BlockSequence,
    Cells,
    Empty,
    InlineRuns,
    Mixed,
    PartialResult,
    Runs,
    Shape,
    TableRows,
    classify,
    flatten_runs,
    merge_results,
    runs_of_blocks,
)
from docuparse.parse.utils.config import env_config

LanguageDetector: TypeAlias = Callable[[etree._Element], Optional[Language]]


def detect_language_from_class(element: etree._Element) -> Optional[Language]:
    """Language named by a `language-<name>` class on `element` or its nearest `<pre>` ancestor.

    This is how markdown renderers mark fenced code blocks. Item declarations and the like carry no
    such class and get no language.
    """
    pre = next(element.iterancestors("pre"), None)
    for e in (element, pre):
        if e is None:
            continue
        for token in e.get("class", "").split():
            if not token.startswith("language-"):
                continue
            if (language := Language.from_str(token[len("language-") :])) is not None:
                return language
    return None


@dc.dataclass(frozen=True)
class ConversionOptions:
    """Settings that apply to a whole conversion; passed down the recursion unchanged."""

    recursion_limit: int = dc.field(default_factory=lambda: env_config.HTML_RECURSION_LIMIT)
    hidden_classes: frozenset[str] = dc.field(
        default_factory=lambda: env_config.HTML_HIDDEN_CLASSES
    )
    inherit_emphasis: bool = dc.field(default_factory=lambda: env_config.HTML_INHERIT_EMPHASIS)
    language_detector: LanguageDetector = detect_language_from_class


# ------------------------------------------------------------------------------------------------
# ANCESTOR LOOKUPS
# ------------------------------------------------------------------------------------------------


def _inherited_url(element: etree._Element) -> Optional[str]:
    """The `href` of `element` or of its nearest ancestor having one, None if there is none."""
    for e in (element, *element.iterancestors()):
        if (href := e.get("href")) is not None:
            return href
    return None


def _inherited_style(element: etree._Element, depth: int) -> TextStyle:
    """Style formed by the emphasis elements at or above `element`, up to the conversion root.

    `depth` is the nesting depth of `element` below the conversion root, so the walk takes in
    that many ancestors.
    """
    style = TextStyle()
    for e in (element, *itertools.islice(element.iterancestors(), depth)):
        if (emphasis := getattr(e, "emphasis", None)) is not None:
            style = style.overridden_by(emphasis)
    return style


def _is_hidden(element: etree._Element, opts: ConversionOptions) -> bool:
    return not opts.hidden_classes.isdisjoint(element.get("class", "").split())


def _text_before(element: etree._Element) -> str:
    """The text node directly in front of `element`; "" when it follows an element with no tail."""
    previous = element.getprevious()
    if previous is None:
        parent = element.getparent()
        return "" if parent is None else parent.text or ""
    return previous.tail or ""


def _is_blank(result: PartialResult) -> bool:
    """True when `result` is inline runs holding nothing but whitespace."""
    return isinstance(result, InlineRuns) and not plain_text(result.runs).strip()


def _holds_only_images(result: PartialResult) -> bool:
    return isinstance(result, BlockSequence) and all(isinstance(b, Image) for b in result.blocks)


def _iter_visible_text(element: etree._Element, opts: ConversionOptions) -> Iterator[str]:
    """Generate the text of `element` and all its descendants, skipping hidden subtrees."""
    if element.text:
        yield element.text
    for child in element:
        if not _is_hidden(child, opts):
            yield from _iter_visible_text(child, opts)
        if child.tail:
            yield child.tail


# ------------------------------------------------------------------------------------------------
# CUSTOM ELEMENT-CLASSES
# ------------------------------------------------------------------------------------------------


class ConvertibleElement(etree.ElementBase):
    """Base class for all custom element-classes; provides the tree walker.

    Subclasses customize what the element produces for each shape its children can form by
    overriding one or more of the `._map_*()` methods. The defaults here are those of the catch-all
    `DefaultElement`: form a paragraph from inline content and pass blocks through.
    """

    # -- text runs in emphasis elements get this style when emphasis inheritance is enabled --
    emphasis: Optional[TextStyle] = None

    @property
    def is_phrasing(self) -> bool:
        return False

    def convert(self, opts: ConversionOptions, depth: int = 0) -> Optional[PartialResult]:
        """Partial result for this element, None when it contributes nothing.

        `depth` is the nesting depth of this element below the element conversion started at.
        """
        if depth > opts.recursion_limit:
            raise RecursionLimitExceededError(opts.recursion_limit)

        if _is_hidden(self, opts):
            trace_logger.detail("skipping hidden <%s> element", self.tag)  # type: ignore
            return None

        return self._map(classify(list(self._iter_child_results(opts, depth))), opts)

    def _iter_child_results(self, opts: ConversionOptions, depth: int) -> Iterator[PartialResult]:
        """Generate the non-empty result of each child node, in document order.

        Child nodes are this element's text, its child elements, and the tail of each child
        element.
        """
        if self.text:
            yield self._text_result(self.text, opts, depth)

        for child in self:
            tail = child.tail
            if isinstance(child, ConvertibleElement):
                if (result := child.convert(opts, depth + 1)) is not None:
                    yield result
                elif tail and _is_hidden(child, opts) and _text_before(child).endswith(" "):
                    # -- a hidden element leaves no gap, so the spaces around it collapse --
                    tail = tail.lstrip(" ")
            # -- a tail is text of this element, even when the element it follows is hidden --
            if tail:
                yield self._text_result(tail, opts, depth)

    def _text_result(self, text: str, opts: ConversionOptions, depth: int) -> InlineRuns:
        """A single text run for `text`, a text node directly inside this element."""
        style = _inherited_style(self, depth) if opts.inherit_emphasis else TextStyle()
        return InlineRuns((TextAtomic(text, style, _inherited_url(self)),))

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        """Dispatch on the shape of the children."""
        if isinstance(shape, Empty):
            return self._map_empty(opts)
        if isinstance(shape, AllInline):
            return self._map_inline(shape.groups, opts)
        if isinstance(shape, AllTableRows):
            return self._map_rows(shape.rows, opts)
        return self._map_blocks(merge_results(shape.results), opts)

    def _map_empty(self, opts: ConversionOptions) -> Optional[PartialResult]:
        return None

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        runs = flatten_runs(groups)
        return BlockSequence((Paragraph(runs),)) if runs else None

    def _map_rows(self, rows: Sequence[Cells], opts: ConversionOptions) -> Optional[PartialResult]:
        raise InvalidHtmlError(ROW_OUTSIDE_TABLE)

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        return BlockSequence(blocks) if blocks else None


# -- FLOW (BLOCK-ITEM) ELEMENTS ------------------------------------------------------------------


class Flow(ConvertibleElement):
    """Elements that act like a div.

    These can contain other flow elements or phrasing elements.
    """


class BlockItem(Flow):
    """Custom element-class for the `<p>` element.

    A paragraph can only contain phrasing content. Browsers render block content nested inside one
    anyway, so those blocks are passed through rather than rejected.
    """

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        logger.debug(
            "<%s> element contains %d block(s), passing them through", self.tag, len(blocks)
        )
        return super()._map_blocks(blocks, opts)


class Heading(Flow):
    """An `<h1>..<h6>` element.

    A heading must not contain block content, unlike a paragraph there is no sensible way to
    render a heading made of blocks. Images are the exception: a heading decorated with one (like a
    crate badge) keeps its text and the image is dropped.
    """

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        if isinstance(shape, Mixed):
            shape = classify([r for r in shape.results if not _holds_only_images(r)])
        return super()._map(shape, opts)

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        runs = flatten_runs(groups)
        if not runs:
            return None
        HeadingCls = heading_for_level(int(self.tag[1]))
        return BlockSequence((HeadingCls(runs),))

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        raise InvalidHtmlError(f"Heading <{self.tag}> contains block content.")


class ListBlock(Flow):
    """Either a `<ul>` or `<ol>` element; only the latter is enumerated."""

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        runs = flatten_runs(groups)
        return self._map_blocks([Paragraph(runs)] if runs else [], opts)

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        if not blocks:
            return None
        return BlockSequence((BulletPoints(blocks, enumerated=self.tag == "ol"),))


class QuoteBlock(Flow):
    """A `<blockquote>` element, which can hold several paragraphs."""

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        runs = flatten_runs(groups)
        return self._map_blocks([Paragraph(runs)] if runs else [], opts)

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        return BlockSequence((Quote(blocks),)) if blocks else None


class Pre(Flow):
    """Custom element-class for `<pre>` element.

    A `<pre>` with a `<code>` child gets its code block from that child. One holding text directly
    is a code block itself. Whitespace-only text beside a `<code>` child is source formatting and
    is dropped.
    """

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        if isinstance(shape, Mixed):
            shape = classify([r for r in shape.results if not _is_blank(r)])
        return super()._map(shape, opts)

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        code = "".join(_iter_visible_text(self, opts))
        return BlockSequence((CodeBlock(code, opts.language_detector(self)),)) if code else None


class ImageBlock(Flow):
    """Custom element-class for `<img>` elements; produces an image whatever it contains."""

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        img_src = self.get("data-src", "").strip() or self.get("src", "").strip()
        img_alt = self.get("alt", "").strip()

        if not img_src:
            return None

        return BlockSequence((Image(img_src, img_alt or None),))


class TableBlock(Flow):
    """Custom element-class for `<table>` element.

    Row content must end exactly at a table; anything else inside a table is an error.
    """

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        if isinstance(shape, (AllInline, Mixed)):
            raise InvalidHtmlError("Table contains content other than table rows.")
        return super()._map(shape, opts)

    def _map_rows(self, rows: Sequence[Cells], opts: ConversionOptions) -> Optional[PartialResult]:
        return BlockSequence((Table(rows),))


class TableSection(Flow):
    """A `<thead>`, `<tbody>` or `<tfoot>` element, passes its rows on to the table."""

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        if isinstance(shape, (AllInline, Mixed)):
            raise InvalidHtmlError(f"Table section <{self.tag}> contains content other than rows.")
        return super()._map(shape, opts)

    def _map_rows(self, rows: Sequence[Cells], opts: ConversionOptions) -> Optional[PartialResult]:
        return TableRows(rows)


class TableRowItem(Flow):
    """A `<tr>` element; each child contributes one cell."""

    def _map_empty(self, opts: ConversionOptions) -> Optional[PartialResult]:
        return TableRows(((),))

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        return TableRows((tuple(groups),))

    def _map_rows(self, rows: Sequence[Cells], opts: ConversionOptions) -> Optional[PartialResult]:
        raise InvalidHtmlError("Table row contains content other than table cells.")

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        raise InvalidHtmlError("Table row contains content other than table cells.")


class TableCell(Flow):
    """A `<td>` or `<th>` element.

    A cell always produces runs, possibly none, so a row has exactly one cell per cell element.
    Blocks in a cell (a nested table for example) are degraded to their text.
    """

    def _map_empty(self, opts: ConversionOptions) -> Optional[PartialResult]:
        return InlineRuns(())

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        return InlineRuns(flatten_runs(groups))

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        return InlineRuns(runs_of_blocks(blocks))


class RemovedBlock(Flow):
    """Elements that are to be ignored.

    An element may be ignored because it is navigation or disclosure chrome rather than content.
    Its children are still converted, so malformed markup inside is reported, but the result is
    dropped. Its tail is emitted by its container.
    """

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        return None


# -- PHRASING ELEMENTS ---------------------------------------------------------------------------


class Phrasing(ConvertibleElement):
    """Base-class for phrasing (inline/run) elements like links and spans."""

    @property
    def is_phrasing(self) -> bool:
        return True

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        return InlineRuns(flatten_runs(groups))


class Bold(Phrasing):
    emphasis = TextStyle(bold=True)


class Italic(Phrasing):
    emphasis = TextStyle(italic=True)


class StrikeThrough(Phrasing):
    emphasis = TextStyle(strike_through=True)


class Underline(Phrasing):
    emphasis = TextStyle(underline=True)


class LineBreak(Phrasing):
    """A `<br/>` line-break element."""

    def _map_empty(self, opts: ConversionOptions) -> Optional[PartialResult]:
        return InlineRuns((TextAtomic("\n", url=_inherited_url(self)),))


class Code(Phrasing):
    """Custom element-class for `<code>` element, either inline code or a code block.

    A `<code>` element is inline code when it is not preformatted (it is not inside a `<pre>`) and
    it contains only text. Otherwise it is a code block. Both forms discard any styling of the text
    inside; code spans do not carry nested rich text.
    """

    def _map_inline(
        self, groups: Sequence[Runs], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        if self._is_preformatted or any(not _is_hidden(child, opts) for child in self):
            return self._code_block(opts)

        code = plain_text(flatten_runs(groups))
        return InlineRuns((TextAtomic(code, TextStyle(code=True), _inherited_url(self)),))

    def _map_blocks(
        self, blocks: Sequence[BlockContainer], opts: ConversionOptions
    ) -> Optional[PartialResult]:
        return self._code_block(opts)

    def _code_block(self, opts: ConversionOptions) -> Optional[PartialResult]:
        code = "".join(_iter_visible_text(self, opts))
        return BlockSequence((CodeBlock(code, opts.language_detector(self)),)) if code else None

    @property
    def _is_preformatted(self) -> bool:
        """True when this element is inside a whitespace-preserving `<pre>` element."""
        return next(self.iterancestors("pre"), None) is not None


class RemovedPhrasing(Phrasing):
    """Phrasing where we want to skip the content, like a `<button>`.

    - `.is_phrasing` is True so it doesn't break the paragraph like a block.
    - contents are discarded
    - `element.tail` is preserved
    """

    def _map(self, shape: Shape, opts: ConversionOptions) -> Optional[PartialResult]:
        return None


# -- DEFAULT ELEMENT -----------------------------------------------------------------------------


class DefaultElement(ConvertibleElement):
    """Custom element-class used for any element without an assigned custom element class.

    This is the catch-all case: an unrecognized element (like `<rustdoc-toolbar>`) is treated as a
    transparent text container, forming a paragraph from inline content and passing blocks
    through.
    """


# ------------------------------------------------------------------------------------------------
# HTML PARSER
# ------------------------------------------------------------------------------------------------


html_parser = etree.HTMLParser(remove_comments=True, remove_pis=True)
# -- elements that don't have a registered class get DefaultElement --
fallback = etree.ElementDefaultClassLookup(element=DefaultElement)
# -- elements that do have a registered class are assigned that class via lookup --
element_class_lookup = etree.ElementNamespaceClassLookup(fallback)
html_parser.set_element_class_lookup(element_class_lookup)

# -- register classes --
element_class_lookup.get_namespace(None).update(
    {
        # -- flow/containers --
        "address": Flow,
        "article": Flow,
        "aside": Flow,
        "body": Flow,
        "center": Flow,
        "dd": Flow,
        "details": Flow,  # -- rustdoc wraps the top-level docs in one --
        "div": Flow,
        "dl": Flow,
        "dt": Flow,
        "figcaption": Flow,
        "figure": Flow,
        "footer": Flow,
        "header": Flow,
        "hgroup": Flow,
        "html": Flow,
        "li": Flow,
        "main": Flow,
        "section": Flow,
        # -- block items --
        "h1": Heading,
        "h2": Heading,
        "h3": Heading,
        "h4": Heading,
        "h5": Heading,
        "h6": Heading,
        "p": BlockItem,
        "pre": Pre,
        # -- list blocks --
        "ol": ListBlock,
        "ul": ListBlock,
        # -- quotes --
        "blockquote": QuoteBlock,
        "quote": QuoteBlock,
        # -- image --
        "img": ImageBlock,
        # -- table --
        "table": TableBlock,
        "tbody": TableSection,
        "tfoot": TableSection,
        "thead": TableSection,
        "tr": TableRowItem,
        "td": TableCell,
        "th": TableCell,
        # -- code, inline or block --
        "code": Code,
        # -- annotated phrasing --
        "b": Bold,
        "strong": Bold,
        "em": Italic,
        "i": Italic,
        "del": StrikeThrough,
        "s": StrikeThrough,
        "strike": StrikeThrough,  # -- deprecated - obsolete version of `del` or `s` --
        "ins": Underline,
        "u": Underline,
        # -- transparent phrasing --
        "a": Phrasing,
        "abbr": Phrasing,  # -- abbreviation, like "LLM (Large Language Model)"
        "bdi": Phrasing,  # -- Bidirectional Isolate - important for RTL languages
        "bdo": Phrasing,  # -- Bidirectional Override - maybe reverse
        "big": Phrasing,  # -- deprecated --
        "br": LineBreak,  # -- line break --
        "cite": Phrasing,  # -- title of book or article etc. --
        "data": Phrasing,  # -- provides machine readable value as attribute --
        "dfn": Phrasing,  # -- definition, like new term in italic when first introduced --
        "kbd": Phrasing,  # -- font that looks like keyboard keys --
        "mark": Phrasing,  # -- like yellow highlighter --
        "q": Phrasing,  # -- inline quotation, usually quoted and maybe italic --
        "samp": Phrasing,  # -- sample terminal output --
        "small": Phrasing,  # -- fine-print --
        "span": Phrasing,
        "sub": Phrasing,  # -- subscript --
        "sup": Phrasing,  # -- superscript --
        "time": Phrasing,  # -- provides machine-readable time as attr --
        "tt": Phrasing,  # -- deprecated - "teletype", obsolete version of `code` or `samp` --
        "var": Phrasing,  # -- variable like "x" in a mathematical expression --
        "wbr": Phrasing,  # -- word-break opportunity; empty --
        # -- removed phrasing --
        "button": RemovedPhrasing,
        "input": RemovedPhrasing,
        "select": RemovedPhrasing,
        # -- removed block --
        "caption": RemovedBlock,  # -- a table takes rows only --
        "colgroup": RemovedBlock,
        "form": RemovedBlock,
        "hr": RemovedBlock,
        "nav": RemovedBlock,
        "noscript": RemovedBlock,
        "summary": RemovedBlock,  # -- disclosure widget label, child of `details`
        "template": RemovedBlock,
    }
)
