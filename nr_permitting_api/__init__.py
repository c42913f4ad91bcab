"""
Top‑level package for the NR Permitting records service.

This file makes ``nr_permitting_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``nr_permitting_api.app.services.record_service``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
