# pyright: reportPrivateUsage=false

"""Provides `parse_html()` and `parse_content()`."""

from __future__ import annotations

import re
from typing import IO, Any, Iterable, Optional, Union, cast

import requests
from lxml import etree

from docuparse.documents.content import Content, Paragraph
from docuparse.documents.page import DocuPageContent, assemble_page
from docuparse.errors import ElementCountNotOneError, InvalidHtmlError
from docuparse.logger import logger, trace_logger
from docuparse.parse.html.parser import (
    ConversionOptions,
    ConvertibleElement,
    LanguageDetector,
    html_parser,
)
from docuparse.parse.html.shape import ROW_OUTSIDE_TABLE, BlockSequence, InlineRuns, TableRows
from docuparse.parse.html.whitespace import normalize_whitespace
from docuparse.parse.utils.constants import (
    MAIN_CONTENT_ID,
    MAIN_CONTENT_SELECTOR,
    STRIPPED_TAGS,
    TOLERATED_DIAGNOSTIC_PATTERNS,
)
from docuparse.utils import lazyproperty

_TOLERATED_DIAGNOSTIC = re.compile("|".join(TOLERATED_DIAGNOSTIC_PATTERNS))


def parse_html(filename: Optional[str] = None, **kwargs: Any) -> DocuPageContent:
    """Parse a documentation page into its title, introduction and sections.

    Takes the same arguments as `parse_content()`; see there.
    """
    return assemble_page(parse_content(filename, **kwargs))


def parse_content(
    filename: Optional[str] = None,
    *,
    file: Optional[IO[bytes]] = None,
    text: Optional[str] = None,
    encoding: Optional[str] = None,
    url: Optional[str] = None,
    headers: dict[str, str] = {},
    ssl_verify: bool = True,
    recursion_limit: Optional[int] = None,
    hidden_classes: Optional[Iterable[str]] = None,
    inherit_emphasis: Optional[bool] = None,
    language_detector: Optional[LanguageDetector] = None,
) -> Content:
    """Parse the main content of a documentation page, from title to bottom, into blocks.

    HTML source parameters
    ----------------------
    The HTML to be parsed can be specified four different ways:

    filename
        A string defining the target filename path.
    file
        A file-like object using "rb" mode --> open(filename, "rb").
    text
        The string representation of the HTML document.
    url
        The URL of a documentation page. Only for URLs that return an HTML document.
    headers
        The HTTP headers to be used in the HTTP request when `url` is specified.
    ssl_verify
        If the URL parameter is set, determines whether or not SSL verification is performed
        on the HTTP request.
    encoding
        The encoding method used to decode the input. If None, utf-8 will be used.

    Conversion parameters
    ---------------------
    Each of these defaults to the environment configuration when not specified.

    recursion_limit
        Maximum element nesting depth below the main-content element.
    hidden_classes
        CSS classes marking elements to skip along with everything inside them.
    inherit_emphasis
        When True, text inside `<b>`, `<em>` and the like is styled accordingly.
    language_detector
        Callable receiving a code element and returning its `Language` or None.
    """
    opts = HtmlParseOptions(
        file_path=filename,
        file=file,
        text=text,
        encoding=encoding,
        url=url,
        headers=headers,
        ssl_verify=ssl_verify,
        recursion_limit=recursion_limit,
        hidden_classes=hidden_classes,
        inherit_emphasis=inherit_emphasis,
        language_detector=language_detector,
    )

    return _HtmlContentParser.parse(opts)


class HtmlParseOptions:
    """Encapsulates parsing option validation, computation, and application of defaults."""

    def __init__(
        self,
        *,
        file_path: Optional[str],
        file: Optional[IO[bytes]],
        text: Optional[str],
        encoding: Optional[str],
        url: Optional[str],
        headers: dict[str, str],
        ssl_verify: bool,
        recursion_limit: Optional[int] = None,
        hidden_classes: Optional[Iterable[str]] = None,
        inherit_emphasis: Optional[bool] = None,
        language_detector: Optional[LanguageDetector] = None,
    ):
        self._file_path = file_path
        self._file = file
        self._text = text
        self._encoding = encoding
        self._url = url
        self._headers = headers
        self._ssl_verify = ssl_verify
        self._recursion_limit = recursion_limit
        self._hidden_classes = hidden_classes
        self._inherit_emphasis = inherit_emphasis
        self._language_detector = language_detector

    @lazyproperty
    def conversion_options(self) -> ConversionOptions:
        """Conversion settings; those not specified by the caller come from the environment."""
        overrides: dict[str, Any] = {
            "recursion_limit": self._recursion_limit,
            "hidden_classes": (
                None if self._hidden_classes is None else frozenset(self._hidden_classes)
            ),
            "inherit_emphasis": self._inherit_emphasis,
            "language_detector": self._language_detector,
        }
        return ConversionOptions(**{k: v for k, v in overrides.items() if v is not None})

    @lazyproperty
    def html_text(self) -> str:
        """The HTML document as a string, loaded from wherever the caller specified."""
        sources = [s for s in (self._file_path, self._file, self._text, self._url) if s]
        if len(sources) != 1:
            raise ValueError("Exactly one of filename, file, text, or url must be specified.")

        encoding = self._encoding or "utf-8"

        if self._file_path:
            with open(self._file_path, encoding=encoding) as f:
                return f.read()

        if self._file:
            content = self._file.read()
            return content.decode(encoding) if isinstance(content, bytes) else content

        if self._text:
            return str(self._text)

        response = requests.get(
            cast(str, self._url), headers=self._headers, verify=self._ssl_verify
        )
        if not response.ok:
            raise ValueError(f"Error status code on GET of provided URL: {response.status_code}")
        content_type = response.headers.get("Content-Type", "")
        if not content_type.startswith("text/html"):
            raise ValueError(f"Expected content type text/html. Got {content_type}.")

        return response.text


class _HtmlContentParser:
    """Parse the main content of an HTML document into blocks."""

    def __init__(self, opts: HtmlParseOptions):
        self._opts = opts

    @classmethod
    def parse(cls, opts: HtmlParseOptions) -> Content:
        """Content of the main-content element of the HTML document provided by `opts`."""
        return cls(opts)._content

    @lazyproperty
    def _content(self) -> Content:
        content = get_main_content(self._root, self._opts.conversion_options)
        logger.debug("parsed %s into %d block(s)", MAIN_CONTENT_SELECTOR, len(content))
        return content

    @lazyproperty
    def _root(self) -> etree._Element:
        """The root HTML element."""
        return load_html(self._opts.html_text)


def load_html(html_text: str) -> etree._Element:
    """Parse `html_text` into an element tree ready for conversion.

    Parser diagnostics other than tolerated noise raise `InvalidHtmlError`. Elements that never
    hold content (like `<script>`) are removed and formatting whitespace is normalized.
    """
    if not html_text.strip():
        raise InvalidHtmlError("HTML document is empty.")

    root = _fromstring(html_text)
    raise_on_diagnostics(entry.message for entry in html_parser.error_log)

    if root is None:
        raise InvalidHtmlError("HTML document is empty.")

    etree.strip_elements(root, *STRIPPED_TAGS, with_tail=False)
    normalize_whitespace(root)
    return root


def _fromstring(html_text: str) -> Optional[etree._Element]:
    # NOTE - `lxml` will not parse a `str` that includes an XML encoding declaration and raises
    #     ValueError: Unicode strings with encoding declaration are not supported. ...
    # That is not valid HTML (would be in XHTML) but browsers accept it, so UTF-8 encode the str
    # and parse the bytes instead.
    try:
        try:
            return etree.fromstring(html_text, html_parser)
        except ValueError:
            return etree.fromstring(html_text.encode("utf-8"), html_parser)
    except etree.LxmlError as e:
        raise InvalidHtmlError(str(e)) from e


def raise_on_diagnostics(messages: Iterable[str]) -> None:
    """Raise `InvalidHtmlError` when `messages` holds a diagnostic that is not tolerated noise.

    The error message joins all such diagnostics, one per line. Tolerated ones are only logged.
    """
    fatal: list[str] = []
    for message in (m.strip() for m in messages):
        if _TOLERATED_DIAGNOSTIC.match(message):
            trace_logger.detail("ignoring HTML diagnostic: %s", message)  # type: ignore
        else:
            fatal.append(message)

    if fatal:
        raise InvalidHtmlError("\n".join(fatal))


def get_main_content(
    root: etree._Element, opts: Optional[ConversionOptions] = None
) -> Content:
    """Find and convert the one main-content element of the documentation page.

    Raises `ElementCountNotOneError` when the page has no such element or more than one.
    """
    matches = cast("list[etree._Element]", root.xpath(f"//*[@id='{MAIN_CONTENT_ID}']"))
    if len(matches) != 1:
        raise ElementCountNotOneError(MAIN_CONTENT_SELECTOR, len(matches))

    return parse_to_content(matches[0], opts)


def parse_to_content(
    element: Union[etree._Element, ConvertibleElement], opts: Optional[ConversionOptions] = None
) -> Content:
    """Convert `element` and everything below it into content.

    `element` must come from a tree parsed with `html_parser`.
    """
    if not isinstance(element, ConvertibleElement):
        raise TypeError(f"element must be parsed with `html_parser`, got {type(element).__name__}")

    result = element.convert(opts or ConversionOptions())

    if isinstance(result, InlineRuns) and result.runs:
        return Content([Paragraph(result.runs)])
    if isinstance(result, BlockSequence):
        return Content(result.blocks)
    if isinstance(result, TableRows):
        raise InvalidHtmlError(ROW_OUTSIDE_TABLE)
    raise InvalidHtmlError("HTML Element contained no content.")
