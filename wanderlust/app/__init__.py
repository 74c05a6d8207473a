"""
Application package initializer.

The project is organised into small pieces: ``core`` holds the
configuration, database, security and session plumbing, ``schemas``
the pydantic payload models, ``services`` the store operations and
``api`` the routers together with the guard dependencies.  Pages are
rendered server side from ``templates``.
"""

from .main import app  # noqa: F401
