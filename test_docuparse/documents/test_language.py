"""Test suite for `docuparse.documents.language` module."""

import pytest

from docuparse.documents.language import Language


@pytest.mark.parametrize(
    ("name", "expected_value"),
    [
        ("rust", Language.RUST),
        ("Rust", Language.RUST),
        (" PYTHON ", Language.PYTHON),
        ("rs", Language.RUST),
        ("sh", Language.BASH),
        ("shell", Language.BASH),
        ("c++", Language.CPP),
        ("golang", Language.GO),
        ("js", Language.JAVASCRIPT),
        ("ts", Language.TYPESCRIPT),
        ("yml", Language.YAML),
        ("toml", Language.TOML),
    ],
)
def test_from_str_resolves_names_and_aliases(name: str, expected_value: Language):
    assert Language.from_str(name) is expected_value


@pytest.mark.parametrize("name", ["", "text", "brainfuck", "rust2"])
def test_from_str_returns_None_for_an_unknown_language(name: str):
    assert Language.from_str(name) is None


def test_every_language_resolves_from_its_own_value():
    assert all(Language.from_str(language.value) is language for language in Language)
