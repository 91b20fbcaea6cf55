"""Test suite for `docuparse.utils` module."""

import pytest

from docuparse.utils import lazyproperty


class DescribeLazyProperty:
    """Unit-test suite for `docuparse.utils.lazyproperty` descriptor."""

    def it_computes_the_value_only_on_first_access(self):
        obj = self.Counter()

        assert obj.value == 1
        assert obj.value == 1
        assert obj.calls == 1

    def it_caches_separately_for_each_instance(self):
        a, b = self.Counter(), self.Counter()

        assert (a.value, b.value) == (1, 1)

    def it_returns_the_descriptor_when_accessed_on_the_class(self):
        assert isinstance(self.Counter.value, lazyproperty)

    def it_keeps_the_docstring_of_the_decorated_method(self):
        assert self.Counter.value.__doc__ == "Number of calls so far."

    def it_is_read_only(self):
        obj = self.Counter()

        with pytest.raises(AttributeError, match="can't set attribute"):
            obj.value = 42

    class Counter:
        def __init__(self):
            self.calls = 0

        @lazyproperty
        def value(self) -> int:
            """Number of calls so far."""
            self.calls += 1
            return self.calls
