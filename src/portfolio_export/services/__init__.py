"""Service layer for Portfolio Export.

- ExportService: validation, asset collection, rendering and packaging
- PublishService: file generation and GitHub publishing
"""

from .exceptions import ExportError, PublishError, ServiceError
from .export_service import CompiledSite, ExportService, compile_site, pipeline_error, save_archive
from .publish_service import PublishOutcome, PublishService

__all__ = [
    # Services
    "ExportService",
    "PublishService",
    # Types
    "CompiledSite",
    "PublishOutcome",
    # Helpers
    "compile_site",
    "pipeline_error",
    "save_archive",
    # Exceptions
    "ExportError",
    "PublishError",
    "ServiceError",
]
