class HtmlParseError(Exception):
    """Base class for errors raised while turning an HTML page into document content."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ElementCountNotOneError(HtmlParseError):
    """Error raised when a required unique anchor element is missing or duplicated."""

    def __init__(self, selector: str, count: int):
        self.selector = selector
        self.count = count
        super().__init__(
            f"Expected exactly one element matching {selector!r} - found {count}.",
        )


class InvalidHtmlError(HtmlParseError):
    """Error raised when markup is malformed or violates the structure content can take."""


class RecursionLimitExceededError(InvalidHtmlError):
    """Error raised when element nesting is deeper than the configured recursion limit."""

    def __init__(self, recursion_limit: int):
        self.recursion_limit = recursion_limit
        super().__init__(f"Element nesting exceeds recursion limit of {recursion_limit}.")


class PageTypeUnknownError(HtmlParseError):
    """Error raised when the kind of documentation page cannot be determined."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Unknown documentation page type: {text!r}.")
