"""Incident and alert records parsed from Rootly's JSON:API payloads."""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from ..utils.datetime_utils import parse_datetime

T = TypeVar("T")


# =============================================================================
# JSON:API helpers
# =============================================================================


def name_of(value: Any) -> str:
    """Extract a display name from any relationship shape the API uses.

    Accepts a plain string, {"name": ...}, {"attributes": {"name": ...}} or
    {"data": {...}} wrappers around either.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        if "data" in value and isinstance(value["data"], dict):
            return name_of(value["data"])
        if isinstance(value.get("attributes"), dict):
            return name_of(value["attributes"])
        name = value.get("name") or value.get("title") or value.get("slug")
        return str(name) if name else ""
    return str(value)


def names_of(value: Any) -> List[str]:
    """Extract a list of names from a to-many relationship or a plain list."""
    if value is None:
        return []
    if isinstance(value, dict):
        value = value.get("data", [])
    if not isinstance(value, list):
        return []
    return [n for n in (name_of(v) for v in value) if n]


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _user_fields(value: Any) -> tuple[str, str]:
    """(name, email) for a user relationship in any supported shape."""
    if isinstance(value, dict) and isinstance(value.get("data"), dict):
        value = value["data"]
    if isinstance(value, dict) and isinstance(value.get("attributes"), dict):
        value = value["attributes"]
    if isinstance(value, dict):
        name = _str(value.get("full_name") or value.get("name"))
        return name, _str(value.get("email"))
    return name_of(value), ""


# =============================================================================
# Records
# =============================================================================


@dataclass
class User:
    name: str = ""
    email: str = ""

    @property
    def display(self) -> str:
        if self.name and self.email:
            return f"{self.name} <{self.email}>"
        return self.name or self.email


@dataclass
class Role:
    """An incident role assignment (commander, scribe, ...)."""

    name: str
    user: User = field(default_factory=User)


@dataclass
class RelatedIncident:
    id: str
    sequential_id: str = ""
    title: str = ""
    status: str = ""

    @property
    def label(self) -> str:
        return self.sequential_id or self.id[:8]


@dataclass
class Incident:
    """A Rootly incident. Detail-only fields stay empty until detail_loaded."""

    id: str
    sequential_id: str = ""
    title: str = ""
    summary: str = ""
    status: str = ""
    severity: str = ""
    kind: str = ""
    url: str = ""
    short_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    detected_at: Optional[datetime] = None
    acknowledged_at: Optional[datetime] = None
    mitigated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    services: List[str] = field(default_factory=list)
    environments: List[str] = field(default_factory=list)
    teams: List[str] = field(default_factory=list)
    slack_channel_url: str = ""
    jira_issue_url: str = ""

    # Populated by the detail endpoint
    roles: List[Role] = field(default_factory=list)
    causes: List[str] = field(default_factory=list)
    incident_types: List[str] = field(default_factory=list)
    functionalities: List[str] = field(default_factory=list)
    created_by: Optional[User] = None
    detail_loaded: bool = False

    @property
    def rootly_url(self) -> str:
        if self.short_url:
            return self.short_url
        if self.url:
            return self.url
        return f"https://rootly.com/account/incidents/{self.id}"

    @classmethod
    def from_api(
        cls,
        resource: Dict[str, Any],
        included: Optional[List[Dict[str, Any]]] = None,
        detail: bool = False,
    ) -> "Incident":
        """Create an Incident from a JSON:API resource object."""
        attrs = resource.get("attributes") or {}

        seq = attrs.get("sequential_id")
        sequential_id = f"INC-{seq}" if seq not in (None, "") else ""

        incident = cls(
            id=_str(resource.get("id")),
            sequential_id=sequential_id,
            title=_str(attrs.get("title")),
            summary=_str(attrs.get("summary")),
            status=_str(attrs.get("status")),
            severity=name_of(attrs.get("severity")),
            kind=_str(attrs.get("kind")),
            url=_str(attrs.get("url")),
            short_url=_str(attrs.get("short_url")),
            created_at=parse_datetime(attrs.get("created_at")),
            updated_at=parse_datetime(attrs.get("updated_at")),
            started_at=parse_datetime(attrs.get("started_at")),
            detected_at=parse_datetime(attrs.get("detected_at")),
            acknowledged_at=parse_datetime(attrs.get("acknowledged_at")),
            mitigated_at=parse_datetime(attrs.get("mitigated_at")),
            resolved_at=parse_datetime(attrs.get("resolved_at")),
            services=names_of(attrs.get("services")),
            environments=names_of(attrs.get("environments")),
            teams=names_of(attrs.get("groups")),
            slack_channel_url=_str(attrs.get("slack_channel_url")),
            jira_issue_url=_str(attrs.get("jira_issue_url")),
        )

        if detail:
            incident.causes = names_of(attrs.get("causes"))
            incident.incident_types = names_of(attrs.get("incident_types"))
            incident.functionalities = names_of(attrs.get("functionalities"))
            if attrs.get("user"):
                name, email = _user_fields(attrs["user"])
                incident.created_by = User(name=name, email=email)
            incident.roles = _parse_roles(included or [])
            incident.detail_loaded = True

        return incident


def _parse_roles(included: List[Dict[str, Any]]) -> List[Role]:
    roles = []
    for entry in included:
        if entry.get("type") != "incident_role_assignments":
            continue
        attrs = entry.get("attributes") or {}
        role_name = name_of(attrs.get("incident_role"))
        if not role_name:
            continue
        user_name, user_email = _user_fields(attrs.get("user"))
        roles.append(Role(name=role_name, user=User(name=user_name, email=user_email)))
    return roles


@dataclass
class Alert:
    """A Rootly alert. Detail-only fields stay empty until detail_loaded."""

    id: str
    short_id: str = ""
    summary: str = ""
    description: str = ""
    status: str = ""
    source: str = ""
    url: str = ""
    external_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    services: List[str] = field(default_factory=list)
    environments: List[str] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)

    # Populated by the detail endpoint
    urgency: str = ""
    responders: List[str] = field(default_factory=list)
    notified_users: List[User] = field(default_factory=list)
    related_incidents: List[RelatedIncident] = field(default_factory=list)
    external_id: str = ""
    noise: str = ""
    deduplication_key: str = ""
    is_group_leader_alert: bool = False
    detail_loaded: bool = False

    @property
    def rootly_url(self) -> str:
        if self.url:
            return self.url
        if self.short_id:
            return f"https://rootly.com/account/alerts/{self.short_id}"
        return ""

    @classmethod
    def from_api(cls, resource: Dict[str, Any], detail: bool = False) -> "Alert":
        """Create an Alert from a JSON:API resource object."""
        attrs = resource.get("attributes") or {}

        alert = cls(
            id=_str(resource.get("id")),
            short_id=_str(attrs.get("short_id")),
            summary=_str(attrs.get("summary")),
            description=_str(attrs.get("description")),
            status=_str(attrs.get("status")),
            source=_str(attrs.get("source")),
            url=_str(attrs.get("url")),
            external_url=_str(attrs.get("external_url")),
            created_at=parse_datetime(attrs.get("created_at")),
            updated_at=parse_datetime(attrs.get("updated_at")),
            started_at=parse_datetime(attrs.get("started_at")),
            ended_at=parse_datetime(attrs.get("ended_at")),
            services=names_of(attrs.get("services")),
            environments=names_of(attrs.get("environments")),
            groups=names_of(attrs.get("groups")),
            labels=_parse_labels(attrs.get("labels")),
        )

        if detail:
            alert.urgency = name_of(attrs.get("alert_urgency") or attrs.get("urgency"))
            alert.responders = names_of(attrs.get("responders"))
            alert.notified_users = [
                User(*_user_fields(u)) for u in _as_list(attrs.get("notified_users"))
            ]
            alert.related_incidents = [
                _parse_related_incident(i) for i in _as_list(attrs.get("incidents"))
            ]
            alert.external_id = _str(attrs.get("external_id"))
            alert.noise = _str(attrs.get("noise"))
            alert.deduplication_key = _str(attrs.get("deduplication_key"))
            alert.is_group_leader_alert = bool(attrs.get("is_group_leader_alert"))
            alert.detail_loaded = True

        return alert


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, dict):
        value = value.get("data")
    return value if isinstance(value, list) else []


def _parse_labels(value: Any) -> Dict[str, str]:
    """Labels come either as a mapping or as [{"key": k, "value": v}, ...]."""
    if isinstance(value, dict):
        return {str(k): _str(v) for k, v in value.items()}
    labels = {}
    for entry in _as_list(value):
        if isinstance(entry, dict) and entry.get("key"):
            labels[str(entry["key"])] = _str(entry.get("value"))
    return labels


def _parse_related_incident(value: Any) -> RelatedIncident:
    if isinstance(value, dict) and isinstance(value.get("attributes"), dict):
        attrs = value["attributes"]
        ident = _str(value.get("id"))
    else:
        attrs = value if isinstance(value, dict) else {}
        ident = _str(attrs.get("id"))
    seq = attrs.get("sequential_id")
    return RelatedIncident(
        id=ident,
        sequential_id=f"INC-{seq}" if seq not in (None, "") else "",
        title=_str(attrs.get("title")),
        status=_str(attrs.get("status")),
    )


# =============================================================================
# Pages
# =============================================================================


@dataclass
class PaginationInfo:
    """Pagination metadata for one fetched page."""

    current_page: int = 1
    has_next: bool = False
    has_prev: bool = False
    total_pages: int = 0  # 0 when unknown
    total_count: int = 0

    @classmethod
    def from_api(cls, body: Dict[str, Any], requested_page: int) -> "PaginationInfo":
        """Read meta (falling back to links) from a list response body."""
        meta = body.get("meta") or {}
        links = body.get("links") or {}

        current = _int(meta.get("current_page")) or requested_page
        total_pages = _int(meta.get("total_pages"))

        if "next_page" in meta:
            has_next = meta.get("next_page") is not None
        elif links:
            has_next = bool(links.get("next"))
        else:
            has_next = total_pages > 0 and current < total_pages

        if "prev_page" in meta:
            has_prev = meta.get("prev_page") is not None
        elif links:
            has_prev = bool(links.get("prev"))
        else:
            has_prev = current > 1

        return cls(
            current_page=max(1, current),
            has_next=has_next,
            has_prev=has_prev,
            total_pages=total_pages,
            total_count=_int(meta.get("total_count")),
        )


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass
class PageResult(Generic[T]):
    items: List[T]
    pagination: PaginationInfo


def merge_detail(summary: T, detail: T) -> T:
    """Fold a detail record into its list summary.

    Detail values win; empty detail values fall back to the summary so a
    sparse detail response never blanks out fields the list already had.
    """
    merged = {}
    for f in fields(summary):  # type: ignore[arg-type]
        value = getattr(detail, f.name)
        if value is None or value == "" or value == [] or value == {}:
            value = getattr(summary, f.name)
        merged[f.name] = value
    merged["detail_loaded"] = True
    return replace(summary, **merged)  # type: ignore[type-var]
