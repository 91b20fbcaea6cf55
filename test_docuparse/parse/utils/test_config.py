from docuparse.parse.utils.config import env_config


def test_default_config(monkeypatch):
    monkeypatch.delenv("HTML_RECURSION_LIMIT", raising=False)
    monkeypatch.delenv("HTML_HIDDEN_CLASSES", raising=False)
    monkeypatch.delenv("HTML_INHERIT_EMPHASIS", raising=False)

    assert env_config.HTML_RECURSION_LIMIT == 200
    assert env_config.HTML_HIDDEN_CLASSES == frozenset({"out-of-band"})
    assert env_config.HTML_INHERIT_EMPHASIS is False


def test_env_override_of_recursion_limit(monkeypatch):
    monkeypatch.setenv("HTML_RECURSION_LIMIT", "12")
    assert env_config.HTML_RECURSION_LIMIT == 12


def test_env_override_of_hidden_classes(monkeypatch):
    monkeypatch.setenv("HTML_HIDDEN_CLASSES", "out-of-band, sidebar,,")
    assert env_config.HTML_HIDDEN_CLASSES == frozenset({"out-of-band", "sidebar"})


def test_env_override_of_inherit_emphasis(monkeypatch):
    monkeypatch.setenv("HTML_INHERIT_EMPHASIS", "True")
    assert env_config.HTML_INHERIT_EMPHASIS is True

    monkeypatch.setenv("HTML_INHERIT_EMPHASIS", "no")
    assert env_config.HTML_INHERIT_EMPHASIS is False


def test_empty_env_value_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("HTML_RECURSION_LIMIT", "")
    assert env_config.HTML_RECURSION_LIMIT == 200
