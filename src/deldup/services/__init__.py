"""File removal, deletion policy and index export services."""

from .file_service import FileService
from .deletion_policy import DeletionPolicy, DeletionOutcome, DeleteAnswer
from .export_service import ExportService

__all__ = ["FileService", "DeletionPolicy", "DeletionOutcome", "DeleteAnswer", "ExportService"]
