"""
Top‑level package for the character ranking admin API.

This file makes ``ranking_admin_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``ranking_admin_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
