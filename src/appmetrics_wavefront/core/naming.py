"""Metric name construction."""

import re

NAME_SEPARATOR = "."

_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9_.\-~]")


def concat(*components: str) -> str:
    """Join name components with the name separator."""
    return NAME_SEPARATOR.join(components)


def sanitize(name: str) -> str:
    """Replace every character Wavefront does not accept in a name with ``_``.

    Allowed characters are ASCII letters and digits, ``_``, ``.``, ``-`` and
    ``~``. Sanitizing an already sanitized name returns it unchanged.
    """
    return _DISALLOWED_CHARS.sub("_", name)
