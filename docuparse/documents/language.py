"""Programming languages a code block can be tagged with."""

from __future__ import annotations

import enum
from typing import Optional


class Language(enum.Enum):
    """Closed set of languages known to downstream syntax highlighters.

    Names are normalized on the way in so nobody needs to pass around strings that might be upper
    case, abbreviations, etc.
    """

    BASH = "bash"
    C = "c"
    CPP = "cpp"
    GO = "go"
    HTML = "html"
    INI = "ini"
    JAVA = "java"
    JAVASCRIPT = "javascript"
    JSON = "json"
    KOTLIN = "kotlin"
    LUA = "lua"
    MATLAB = "matlab"
    PERL = "perl"
    PHP = "php"
    PYTHON = "python"
    R = "r"
    RUBY = "ruby"
    RUST = "rust"
    SQL = "sql"
    SWIFT = "swift"
    TOML = "toml"
    TYPESCRIPT = "typescript"
    XML = "xml"
    YAML = "yaml"

    @classmethod
    def from_str(cls, name: str) -> Optional[Language]:
        """The language identified by `name` or one of its common aliases, None if unknown."""
        return _ALIASES.get(name.strip().lower())


_ALIASES = {
    **{language.value: language for language in Language},
    "sh": Language.BASH,
    "shell": Language.BASH,
    "c++": Language.CPP,
    "golang": Language.GO,
    "js": Language.JAVASCRIPT,
    "py": Language.PYTHON,
    "rs": Language.RUST,
    "ts": Language.TYPESCRIPT,
    "yml": Language.YAML,
}
