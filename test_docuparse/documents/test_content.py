# pyright: reportPrivateUsage=false

"""Test suite for `docuparse.documents.content` module."""

from __future__ import annotations

import dataclasses as dc

import pytest

from docuparse.documents.content import (
    BlockContainer,
    BulletPoints,
    Code,
    Content,
    Heading1,
    Heading2,
    Heading3,
    Heading4,
    Image,
    Paragraph,
    Quote,
    Table,
    TextAtomic,
    TextAtomicBuilder,
    TextStyle,
    heading_for_level,
    merge_blocks,
    plain_text,
)
from docuparse.documents.language import Language

# ================================================================================================
# TEXT RUNS
# ================================================================================================


class DescribeTextStyle:
    """Unit-test suite for `docuparse.documents.content.TextStyle` objects."""

    def it_leaves_every_flag_unspecified_by_default(self):
        style = TextStyle()

        assert all(getattr(style, f.name) is None for f in dc.fields(style))

    def it_distinguishes_an_explicit_False_from_unspecified(self):
        assert TextStyle(bold=False) != TextStyle()

    def it_normalizes_color_triples_to_tuples(self):
        assert TextStyle(foreground_rgb=[1, 2, 3]) == TextStyle(foreground_rgb=(1, 2, 3))

    def it_is_hashable(self):
        assert len({TextStyle(bold=True), TextStyle(bold=True), TextStyle(code=True)}) == 2

    def it_only_shows_specified_fields_in_its_repr(self):
        assert repr(TextStyle()) == "TextStyle()"
        style = TextStyle(code=True, underline=False)
        assert repr(style) == "TextStyle(code=True, underline=False)"

    def it_can_be_overridden_by_the_specified_fields_of_another_style(self):
        base = TextStyle(bold=True, italic=False)

        style = base.overridden_by(TextStyle(italic=True, underline=True))

        assert style == TextStyle(bold=True, italic=True, underline=True)
        # -- the original is unchanged --
        assert base == TextStyle(bold=True, italic=False)


class DescribeTextAtomic:
    """Unit-test suite for `docuparse.documents.content.TextAtomic` objects."""

    def it_is_equal_only_when_text_style_and_url_all_match(self):
        atomic = TextAtomic("rand", TextStyle(code=True), "index.html")

        assert atomic == TextAtomic("rand", TextStyle(code=True), "index.html")
        assert atomic != TextAtomic("rand", TextStyle(code=True))
        assert atomic != TextAtomic("rand", TextStyle(), "index.html")
        assert atomic != TextAtomic("Rand", TextStyle(code=True), "index.html")

    def it_can_construct_a_simple_unstyled_unlinked_run(self):
        atomic = TextAtomic.simple("Struct ")

        assert atomic.text == "Struct "
        assert atomic.style == TextStyle()
        assert atomic.url is None

    def it_can_produce_a_copy_with_a_link(self):
        atomic = TextAtomic.simple("Error")

        linked = atomic.with_url("#")

        assert linked == TextAtomic("Error", url="#")
        assert atomic.url is None


class DescribeTextAtomicBuilder:
    """Unit-test suite for `docuparse.documents.content.TextAtomicBuilder` objects."""

    def it_builds_a_plain_run_when_nothing_is_set(self):
        assert TextAtomicBuilder("abc").build() == TextAtomic.simple("abc")

    def it_accumulates_style_flags_and_a_link(self):
        atomic = (
            TextAtomicBuilder("fn main")
            .bold()
            .code()
            .italic(False)
            .strike_through()
            .underline()
            .foreground_rgb(255, 0, 0)
            .background_rgb(0, 0, 255)
            .set_url("fn.main.html")
            .build()
        )

        assert atomic == TextAtomic(
            "fn main",
            TextStyle(
                bold=True,
                code=True,
                italic=False,
                strike_through=True,
                underline=True,
                foreground_rgb=(255, 0, 0),
                background_rgb=(0, 0, 255),
            ),
            "fn.main.html",
        )


def test_plain_text_concatenates_the_text_of_runs():
    runs = [TextAtomic.simple("Struct "), TextAtomic("rand", url="index.html")]
    assert plain_text(runs) == "Struct rand"


# ================================================================================================
# BLOCKS
# ================================================================================================


class DescribeBlocks:
    """Unit-test suite for the block value types."""

    @pytest.mark.parametrize(
        "block",
        [
            Heading1([TextAtomic.simple("a")]),
            Paragraph([TextAtomic.simple("a")]),
            Quote([Paragraph([TextAtomic.simple("a")])]),
            Code("fn main() {}", Language.RUST),
            BulletPoints([Paragraph([TextAtomic.simple("a")])], enumerated=True),
            Table([[[TextAtomic.simple("A")], [TextAtomic.simple("B")]]]),
            Image("logo.svg", "logo"),
        ],
    )
    def they_are_all_block_containers_and_hashable(self, block: BlockContainer):
        assert isinstance(block, BlockContainer)
        assert hash(block) == hash(block)

    def it_compares_a_list_built_block_equal_to_a_tuple_built_one(self):
        assert Table([[[TextAtomic.simple("A")]]]) == Table(((((TextAtomic.simple("A"),),),)))
        assert Paragraph([TextAtomic.simple("a")]) == Paragraph((TextAtomic.simple("a"),))

    def but_it_distinguishes_text_blocks_of_different_types(self):
        runs = (TextAtomic.simple("a"),)
        assert Paragraph(runs) != Heading1(runs)
        assert Heading1(runs) != Heading2(runs)

    def it_reprs_a_text_block_by_its_own_class_name(self):
        assert repr(Heading3()).startswith("Heading3(")

    def it_has_no_language_and_no_alt_by_default(self):
        assert Code("x").language is None
        assert Image("x.png").alt is None
        assert BulletPoints().enumerated is False


@pytest.mark.parametrize(
    ("level", "expected_value"),
    [(1, Heading1), (2, Heading2), (3, Heading3), (4, Heading4), (5, Heading4), (6, Heading4)],
)
def test_heading_for_level_maps_html_heading_levels(level: int, expected_value: type):
    assert heading_for_level(level) is expected_value


@pytest.mark.parametrize("level", [0, 7])
def test_heading_for_level_raises_outside_of_html_heading_levels(level: int):
    with pytest.raises(ValueError, match="heading level must be between 1 and 6"):
        heading_for_level(level)


# -- merge_blocks() ------------------------------


class DescribeMergeBlocks:
    """Unit-test suite for `docuparse.documents.content.merge_blocks()`."""

    def it_concatenates_two_paragraphs(self):
        a, b = TextAtomic.simple("a"), TextAtomic("b", url="#")

        assert merge_blocks(Paragraph([a]), Paragraph([b])) == (Paragraph([a, b]),)

    def it_concatenates_two_headings_of_the_same_level(self):
        a, b = TextAtomic.simple("a"), TextAtomic.simple("b")

        assert merge_blocks(Heading2([a]), Heading2([b])) == (Heading2([a, b]),)

    def it_concatenates_the_blocks_of_two_quotes(self):
        p, q = Paragraph([TextAtomic.simple("p")]), Paragraph([TextAtomic.simple("q")])

        assert merge_blocks(Quote([p]), Quote([q])) == (Quote([p, q]),)

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (Heading1([TextAtomic.simple("a")]), Heading2([TextAtomic.simple("b")])),
            (Paragraph([TextAtomic.simple("a")]), Heading1([TextAtomic.simple("b")])),
            (Code("a"), Code("b")),
            (Image("a.png"), Image("b.png")),
            (Table(), Table()),
            (BulletPoints(), BulletPoints()),
        ],
    )
    def but_it_returns_both_blocks_unchanged_otherwise(self, a: BlockContainer, b: BlockContainer):
        assert merge_blocks(a, b) == (a, b)


# ================================================================================================
# CONTENT
# ================================================================================================


class DescribeContent:
    """Unit-test suite for `docuparse.documents.content.Content` objects."""

    def it_is_an_ordered_sized_iterable_of_blocks(self):
        blocks = [Heading1([TextAtomic.simple("t")]), Code("x")]

        content = Content(blocks)

        assert list(content) == blocks
        assert len(content) == 2

    def it_is_empty_by_default(self):
        assert len(Content()) == 0
        assert Content() == Content([])
