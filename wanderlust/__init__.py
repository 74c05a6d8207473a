"""
Top‑level package for the Wanderlust listings application.

This file makes ``wanderlust`` a Python package so that modules within
``app`` can be imported using fully qualified names like
``wanderlust.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
