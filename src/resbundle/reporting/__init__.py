"""Reporter backends for resbundle.

One reporter is active per process; :func:`get_reporter` falls back to
:class:`PlainReporter`. The CLI picks the backend from ``-r/--reporter``.
"""

from .base import (
    get_reporter,
    get_verbosity,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "get_reporter",
    "set_reporter",
    "get_verbosity",
    "set_verbosity",
    "task",
    "PlainReporter",
    "RichReporter",
    "JsonLinesReporter",
    "SilentReporter",
]
