"""
This module contains variables that are permitted to be tweaked by the system environment, for
example how deep element nesting may go before conversion gives up. Constants do NOT belong in
this module. Constants are names and settings that should not be altered without making a code
change (e.g. the id of the main-content element). Constants go into `./constants.py`
"""

import os
from dataclasses import dataclass

from docuparse.parse.utils.constants import OUT_OF_BAND_CLASS


@dataclass
class ENVConfig:
    """class for configuring environment parameters"""

    def _get_string(self, var: str, default_value: str = "") -> str:
        """attempt to get the value of var from the os environment; if not present return the
        default_value"""
        return os.environ.get(var, default_value)

    def _get_int(self, var: str, default_value: int) -> int:
        if value := self._get_string(var):
            return int(value)
        return default_value

    def _get_bool(self, var: str, default_value: bool) -> bool:
        if value := self._get_string(var):
            return value.lower() in ("true", "1", "t")
        return default_value

    @property
    def HTML_RECURSION_LIMIT(self) -> int:
        """maximum element nesting depth below the converted root

        Deeper markup is rejected with a `RecursionLimitExceededError` rather than exhausting the
        interpreter stack.
        """
        return self._get_int("HTML_RECURSION_LIMIT", 200)

    @property
    def HTML_HIDDEN_CLASSES(self) -> frozenset[str]:
        """comma-separated CSS classes marking elements whose whole subtree is skipped"""
        value = self._get_string("HTML_HIDDEN_CLASSES", OUT_OF_BAND_CLASS)
        return frozenset(c.strip() for c in value.split(",") if c.strip())

    @property
    def HTML_INHERIT_EMPHASIS(self) -> bool:
        """when true, text runs take bold/italic/etc. style from enclosing emphasis elements"""
        return self._get_bool("HTML_INHERIT_EMPHASIS", False)


env_config = ENVConfig()
