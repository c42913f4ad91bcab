"""
Application package initializer.

The package is organised into three layers: ``core`` (configuration,
logging and the storage handle), ``schemas`` (pydantic models for
records) and ``services`` (record persistence and retry policy).  The
HTTP layer that exposes these operations lives outside this package
and talks to it through :class:`RecordService`.
"""

from .services.record_service import RecordService, build_record_service  # noqa: F401
