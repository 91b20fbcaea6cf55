"""Page-level view of a documentation page's content."""

from __future__ import annotations

import dataclasses as dc
from typing import Sequence, Tuple

from typing_extensions import TypeAlias

from docuparse.documents.content import (
    BlockContainer,
    Content,
    Heading1,
    Heading2,
    TextAtomic,
    plain_text,
)

Section: TypeAlias = Tuple[str, Content]


@dc.dataclass(frozen=True)
class DocuPageContent:
    """Everything on a page that can be rendered in a markdown style.

    A typical page has a title like "Struct rand::Error", then some introduction generated from
    markdown like example code, then a list of sections like "Implementations" and "Trait
    Implementations".
    """

    title: Sequence[TextAtomic] = ()
    introduction: Content = dc.field(default_factory=Content)
    sections: Sequence[Section] = ()

    def __post_init__(self):
        object.__setattr__(self, "title", tuple(self.title))
        object.__setattr__(self, "sections", tuple(tuple(s) for s in self.sections))


def assemble_page(content: Content) -> DocuPageContent:
    """Split flat `content` into title, introduction and `<h2>`-delimited sections.

    A leading `Heading1` provides the title and is not repeated in the introduction.
    """
    blocks = list(content)

    title: Sequence[TextAtomic] = ()
    if blocks and isinstance(blocks[0], Heading1):
        title = blocks.pop(0).atomics

    introduction: list[BlockContainer] = []
    sections: list[tuple[str, list[BlockContainer]]] = []
    for block in blocks:
        if isinstance(block, Heading2):
            sections.append((plain_text(block.atomics).strip(), []))
        elif sections:
            sections[-1][1].append(block)
        else:
            introduction.append(block)

    return DocuPageContent(
        title=title,
        introduction=Content(introduction),
        sections=[(name, Content(section_blocks)) for name, section_blocks in sections],
    )
