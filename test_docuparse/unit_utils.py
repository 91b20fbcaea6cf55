"""Utilities that ease unit-testing."""

from __future__ import annotations

import pathlib
from typing import Any
from unittest.mock import Mock, patch

from lxml import etree
from pytest import FixtureRequest, LogCaptureFixture, MonkeyPatch  # noqa: PT013

from docuparse.parse.html.parser import html_parser
from docuparse.parse.html.whitespace import normalize_whitespace

__all__ = (
    "FixtureRequest",
    "LogCaptureFixture",
    "Mock",
    "MonkeyPatch",
    "example_doc_path",
    "example_doc_text",
    "function_mock",
    "parse_fragment",
)


def example_doc_path(file_name: str) -> str:
    """Resolve the absolute-path to `file_name` in the example-docs directory."""
    example_docs_dir = pathlib.Path(__file__).parent.parent / "example-docs"
    file_path = example_docs_dir / file_name
    return str(file_path.resolve())


def example_doc_text(file_name: str) -> str:
    """Contents of example-doc `file_name` as text (decoded as utf-8)."""
    with open(example_doc_path(file_name), encoding="utf-8") as f:
        return f.read()


def parse_fragment(html_text: str, tag: str) -> etree.ElementBase:
    """The first `tag` element of `html_text` parsed with the custom element classes.

    Whitespace is normalized the way document loading does it, so the fragment can be indented
    for readability. Look the element up by tag because the parser may wrap a fragment in implied
    elements (like a `<p>` around top-level phrasing).
    """
    html = etree.fromstring(html_text, html_parser)
    normalize_whitespace(html)
    return html.xpath(f"//{tag}")[0]


# ------------------------------------------------------------------------------------------------
# MOCKING FIXTURES
# ------------------------------------------------------------------------------------------------
# These allow full-featured and type-safe mocks to be created simply by adding a unit-test
# fixture.
# ------------------------------------------------------------------------------------------------


def function_mock(
    request: FixtureRequest, q_function_name: str, autospec: bool = True, **kwargs: Any
) -> Mock:
    """Return mock patching function with qualified name `q_function_name`.

    Patch is reversed after calling test returns.
    """
    _patch = patch(q_function_name, autospec=autospec, **kwargs)
    request.addfinalizer(_patch.stop)
    return _patch.start()
