"""Partial conversion results and how the results of sibling elements combine.

Conversion is bottom-up. Each HTML element produces zero or one *partial result* once its children
are converted:

- `InlineRuns` - text runs that still need a block to live in, like the contents of an `<a>`
  element,
- `TableRows` - the rows of a `<tr>` (or a row-group like `<tbody>`), which only a `<table>` can
  take,
- `BlockSequence` - one or more finished blocks.

The parent element looks at the *shape* its children collectively form before deciding what it
produces itself. For example, an element whose children are all inline is a text container (like a
heading or a paragraph), while one whose children are all table-rows is a table body.
"""

from __future__ import annotations

import dataclasses as dc
from typing import Iterable, Iterator, Optional, Sequence, Union

from typing_extensions import TypeAlias

from docuparse.documents.content import (
    BlockContainer,
    BulletPoints,
    Code,
    Image,
    Paragraph,
    Quote,
    Table,
    TextAtomic,
    TextBlock,
    TextStyle,
    merge_blocks,
)
from docuparse.errors import InvalidHtmlError

ROW_OUTSIDE_TABLE = "Table row appeared outside of a table."

Runs: TypeAlias = "tuple[TextAtomic, ...]"
Cells: TypeAlias = "tuple[Runs, ...]"


# ------------------------------------------------------------------------------------------------
# PARTIAL RESULTS
# ------------------------------------------------------------------------------------------------


@dc.dataclass(frozen=True)
class InlineRuns:
    runs: Runs = ()

    def __post_init__(self):
        object.__setattr__(self, "runs", tuple(self.runs))


@dc.dataclass(frozen=True)
class TableRows:
    """One or more table rows, each a sequence of cells."""

    rows: tuple[Cells, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "rows", tuple(tuple(tuple(cell) for cell in row) for row in self.rows)
        )


@dc.dataclass(frozen=True)
class BlockSequence:
    blocks: tuple[BlockContainer, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "blocks", tuple(self.blocks))


PartialResult: TypeAlias = Union[InlineRuns, TableRows, BlockSequence]


# ------------------------------------------------------------------------------------------------
# CHILD SHAPES
# ------------------------------------------------------------------------------------------------


@dc.dataclass(frozen=True)
class Empty:
    """No child produced a result."""


@dc.dataclass(frozen=True)
class AllInline:
    """Every child produced inline runs; one run-group per child, in order."""

    groups: tuple[Runs, ...]


@dc.dataclass(frozen=True)
class AllTableRows:
    """Every child produced table-rows; the cells of each row, in order."""

    rows: tuple[Cells, ...]


@dc.dataclass(frozen=True)
class Mixed:
    """Children produced blocks, or a combination of result kinds.

    The raw results are kept because resolving them into blocks can fail; see `merge_results()`.
    """

    results: tuple[PartialResult, ...]


Shape: TypeAlias = Union[Empty, AllInline, AllTableRows, Mixed]


def classify(results: Sequence[PartialResult]) -> Shape:
    """The shape formed by the converted children of an element.

    Shapes are tested in order of precedence; the first that fits is the one returned.
    """
    if not results:
        return Empty()

    if all(isinstance(r, InlineRuns) for r in results):
        return AllInline(tuple(r.runs for r in results))

    if all(isinstance(r, TableRows) for r in results):
        return AllTableRows(tuple(row for r in results for row in r.rows))

    return Mixed(tuple(results))


# ------------------------------------------------------------------------------------------------
# BLOCK-SEQUENCE MERGER
# ------------------------------------------------------------------------------------------------


def merge_results(results: Iterable[PartialResult]) -> list[BlockContainer]:
    """Flatten sibling `results` into one ordered block sequence.

    Neighboring inline runs are coalesced into a paragraph which is closed by the next block (or
    the end of the sequence). That way stray text next to block siblings becomes a paragraph of its
    own rather than being dropped or glued onto a neighboring block.

    Raises `InvalidHtmlError` when a table-row appears; only a table can take those.
    """
    blocks: list[BlockContainer] = []
    pending: Optional[BlockContainer] = None

    for result in results:
        if isinstance(result, InlineRuns):
            incoming = Paragraph(result.runs)
            (pending,) = (incoming,) if pending is None else merge_blocks(pending, incoming)
        elif isinstance(result, BlockSequence):
            blocks.extend(_flush(pending))
            pending = None
            blocks.extend(result.blocks)
        else:
            raise InvalidHtmlError(ROW_OUTSIDE_TABLE)

    blocks.extend(_flush(pending))
    return blocks


def _flush(pending: Optional[BlockContainer]) -> Iterator[BlockContainer]:
    """Generate the pending paragraph, unless there is none or it holds no runs."""
    if isinstance(pending, Paragraph) and pending.atomics:
        yield pending


# ------------------------------------------------------------------------------------------------
# RUN HELPERS
# ------------------------------------------------------------------------------------------------


def flatten_runs(groups: Iterable[Runs]) -> Runs:
    """Concatenate run-groups, preserving order."""
    return tuple(run for group in groups for run in group)


def runs_of_blocks(blocks: Iterable[BlockContainer]) -> Runs:
    """Degrade `blocks` to plain text runs, a single space between each block's runs.

    Used where blocks show up in a place only text can go, like a table cell.
    """
    runs: list[TextAtomic] = []
    for block_runs in (r for r in map(_runs_of_block, blocks) if r):
        if runs:
            runs.append(TextAtomic.simple(" "))
        runs.extend(block_runs)
    return tuple(runs)


def _runs_of_block(block: BlockContainer) -> Runs:
    if isinstance(block, TextBlock):
        return tuple(block.atomics)
    if isinstance(block, Quote):
        return runs_of_blocks(block.blocks)
    if isinstance(block, BulletPoints):
        return runs_of_blocks(block.points)
    if isinstance(block, Table):
        return runs_of_blocks(Paragraph(cell) for row in block.rows for cell in row)
    if isinstance(block, Code):
        return (TextAtomic(block.code, TextStyle(code=True)),)
    if isinstance(block, Image) and block.alt:
        return (TextAtomic.simple(block.alt),)
    return ()
