"""vasu CLI: everyday filesystem commands behind one dispatcher."""

from ._helpers import main  # noqa: F401

# Import command modules to register Click commands with the main group.
from . import _basic, _cp, _compare, _cleanup, _archive, _clipboard, _web  # noqa: F401
