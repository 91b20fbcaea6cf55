MAIN_CONTENT_ID = "main-content"
MAIN_CONTENT_SELECTOR = f"#{MAIN_CONTENT_ID}"

# -- class marking rustdoc chrome (source links, version badges, collapse toggles) --
OUT_OF_BAND_CLASS = "out-of-band"

# -- tokenizer diagnostics that are noise on real-world documentation pages. The first two are
# -- html5ever's wording, the rest are what libxml2 reports for the same conditions plus the
# -- HTML5 element names its HTML4-era tag table does not know and duplicate ids, which are left
# -- to the main-content lookup to report.
TOLERATED_DIAGNOSTIC_PATTERNS = (
    r"^Bad character",
    r"^Character reference does not end with semicolon",
    r"^Tag [\w-]+ invalid",
    r"^htmlParseEntityRef: expecting ';'",
    r"^htmlParseEntityRef: no name",
    r"^htmlParseCharRef: invalid xmlChar value",
    r"^ID [\w-]+ already defined",
)

# -- elements removed from the tree before conversion, contents and all --
STRIPPED_TAGS = ("link", "meta", "noscript", "script", "style")
