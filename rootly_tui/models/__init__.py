"""Domain models for Rootly incidents and alerts."""

from .items import (
    Alert,
    Incident,
    PageResult,
    PaginationInfo,
    RelatedIncident,
    Role,
    User,
    merge_detail,
)

__all__ = [
    "Alert",
    "Incident",
    "PageResult",
    "PaginationInfo",
    "RelatedIncident",
    "Role",
    "User",
    "merge_detail",
]
