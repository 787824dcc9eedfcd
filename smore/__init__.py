"""Smore: personal time tracking over a small authenticated REST API.

The web application lives in :mod:`smore.main`; importing the bare package
has no side effects so tools such as the desktop timer can reuse
:mod:`smore.services` without opening a database.
"""

__version__ = "1.0.0"
