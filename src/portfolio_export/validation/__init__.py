"""Pre-flight validation and input validation models."""

from .errors import ValidationError, ValidationKind, count_by_kind, group_by_kind
from .models import (
    DocumentInput,
    PublishInput,
    RepositoryInput,
    TokenInput,
    is_valid_branch_name,
    is_valid_repo_name,
    is_valid_token,
)
from .validator import (
    ExportValidator,
    check_alt_text,
    check_reachability,
    check_required_fields,
    unsaved_changes_error,
    validate,
)

__all__ = [
    "DocumentInput",
    "ExportValidator",
    "PublishInput",
    "RepositoryInput",
    "TokenInput",
    "ValidationError",
    "ValidationKind",
    "check_alt_text",
    "check_reachability",
    "check_required_fields",
    "count_by_kind",
    "group_by_kind",
    "is_valid_branch_name",
    "is_valid_repo_name",
    "is_valid_token",
    "unsaved_changes_error",
    "validate",
]
