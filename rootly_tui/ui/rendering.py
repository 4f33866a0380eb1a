"""Read-only rendering context and shared text helpers.

Everything user-visible goes through `RenderContext.t()`, and timestamps
through `RenderContext.format_time()`, so rendering never reaches for
global state.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Mapping, Optional

from ..config.constants import DEFAULT_LANGUAGE
from ..utils.datetime_utils import format_relative_time, format_time, resolve_timezone

logger = logging.getLogger(__name__)

EN_US: Mapping[str, str] = {
    # Common
    "common.error": "Error",
    "common.page": "Page",
    "common.yes": "yes",
    "common.loading_page": "Loading page {page}...",
    "common.scroll_focused": "─── {percent}% (j/k scroll, Esc to exit) ───",
    "common.scroll_hint": "─── {percent}% (Enter to scroll) ───",
    "common.refreshing": "Refreshing...",
    "sort.title": "Sort by",
    "sort.newest_first": "newest first",
    "sort.oldest_first": "oldest first",
    "sort.hints": "j/k move  Enter select  Esc close",
    # App chrome and overlays
    "app.key_hints": "j/k move  [/] page  Enter detail  o open  S sort  Tab switch  r refresh  l logs  A about  ? help  q quit",
    "logs.header": "Logs (c clear, Esc to close)",
    "help.body": (
        "Navigation\n"
        "  j / ↓        Move down (scroll detail when focused)\n"
        "  k / ↑        Move up (scroll detail when focused)\n"
        "  g / G        First / last item (top / bottom of detail)\n"
        "  [ / ]        Previous / next page\n"
        "  Enter        Load details, or focus the detail pane\n"
        "  Esc / q      Leave the detail pane\n"
        "  d / u        Half page down / up in the detail pane\n"
        "\n"
        "Actions\n"
        "  o            Open in browser\n"
        "  S            Sort incidents\n"
        "  r            Refresh (clears cache)\n"
        "  Tab          Switch between incidents and alerts\n"
        "  l            Show logs\n"
        "  A            About\n"
        "  ?            Toggle this help\n"
        "  q            Quit"
    ),
    "about.title": "About",
    "about.description": "Terminal dashboard for Rootly incidents and alerts",
    "about.system": "System",
    "about.python": "Python",
    "about.platform": "Platform",
    "about.endpoint": "Endpoint",
    "about.config_file": "Config file",
    "about.log_file": "Log file",
    "about.links": "Links",
    "about.docs": "Documentation",
    "about.close": "Press A or Esc to close",
    # Incidents
    "incidents.title": "Incidents",
    "incidents.none_found": "No incidents found",
    "incidents.select_prompt": "Select an incident to view details",
    "incidents.loading_details": "Loading details...",
    "incidents.press_enter": "Press Enter to load details",
    "incidents.detail.status": "Status",
    "incidents.detail.severity": "Severity",
    "incidents.detail.created_by": "Created by",
    "incidents.detail.description": "Description",
    "incidents.detail.services": "Services",
    "incidents.detail.environments": "Environments",
    "incidents.detail.teams": "Teams",
    "incidents.detail.roles": "Roles",
    "incidents.detail.causes": "Causes",
    "incidents.detail.types": "Types",
    "incidents.detail.functionalities": "Functionalities",
    "incidents.detail.links": "Links",
    "incidents.links.rootly": "Rootly",
    "incidents.links.slack": "Slack",
    "incidents.links.jira": "Jira",
    "incidents.timeline.title": "Timeline",
    "incidents.timeline.created": "Created",
    "incidents.timeline.started": "Started",
    "incidents.timeline.detected": "Detected",
    "incidents.timeline.acknowledged": "Acknowledged",
    "incidents.timeline.mitigated": "Mitigated",
    "incidents.timeline.resolved": "Resolved",
    "incidents.timeline.duration": "Duration",
    "incidents.sort.created": "Created",
    "incidents.sort.created_desc": "When the incident was created",
    "incidents.sort.updated": "Updated",
    "incidents.sort.updated_desc": "Most recent activity",
    "incidents.sort.started": "Started",
    "incidents.sort.started_desc": "When the incident started",
    # Alerts
    "alerts.title": "Alerts",
    "alerts.none_found": "No alerts found",
    "alerts.select_prompt": "Select an alert to view details",
    "alerts.triggered": "Triggered {when}",
    "alerts.detail.source": "Source",
    "alerts.detail.links": "Links",
    "alerts.detail.ended": "Ended",
    "alerts.detail.urgency": "Urgency",
    "alerts.detail.responders": "Responders",
    "alerts.detail.notified_users": "Notified users",
    "alerts.detail.related_incidents": "Related incidents",
    "alerts.detail.metadata": "Metadata",
    "alerts.detail.external_id": "External ID",
    "alerts.detail.noise": "Noise",
    "alerts.detail.group_leader": "Group leader",
    "alerts.detail.dedup_key": "Dedup key",
    "alerts.detail.labels": "Labels",
    "alerts.noise.not_noise": "Not noise",
    "alerts.noise.noise": "Noise",
    "alerts.noise.possible_noise": "Possible noise",
}

STRINGS_BY_LANGUAGE: Mapping[str, Mapping[str, str]] = {
    "en_US": EN_US,
}


def strings_for(language: str) -> Mapping[str, str]:
    strings = STRINGS_BY_LANGUAGE.get(language)
    if strings is None:
        logger.warning(f"No strings for language {language!r}, using {DEFAULT_LANGUAGE}")
        return EN_US
    return strings


@dataclass(frozen=True)
class RenderContext:
    """Display preferences handed to every rendering function."""

    tz: tzinfo = timezone.utc
    strings: Mapping[str, str] = field(default_factory=lambda: EN_US)
    now: Optional[datetime] = None  # fixed clock for tests; None means wall clock

    @classmethod
    def create(cls, timezone_name: str = "UTC", language: str = DEFAULT_LANGUAGE) -> "RenderContext":
        return cls(tz=resolve_timezone(timezone_name), strings=strings_for(language))

    def t(self, key: str, **values: object) -> str:
        template = self.strings.get(key) or EN_US.get(key) or key
        if values:
            try:
                return template.format(**values)
            except (KeyError, IndexError):
                return template
        return template

    def format_time(self, dt: Optional[datetime]) -> str:
        return format_time(dt, self.tz)

    def relative(self, dt: Optional[datetime]) -> str:
        return format_relative_time(dt, self.now)


# =============================================================================
# Glyph helpers
# =============================================================================


def severity_signal(severity: str) -> str:
    """Four-cell signal bar for a severity name."""
    sev = (severity or "").lower()
    if sev in ("critical", "sev0"):
        return "▁▃▅▇"
    if sev in ("high", "sev1"):
        return "▁▃▅░"
    if sev in ("medium", "sev2"):
        return "▁▃░░"
    if sev in ("low", "sev3"):
        return "▁░░░"
    return "░░░░"


def status_dot(status: str) -> str:
    status = (status or "").lower()
    if status in ("resolved", "closed", "mitigated", "cancelled"):
        return "○"
    if status in ("started", "in_progress", "acknowledged"):
        return "◐"
    if status in ("open", "triggered", "critical"):
        return "●"
    return "◉"


ALERT_SOURCES = {
    "datadog": ("🐶", "Datadog"),
    "pagerduty": ("📟", "PagerDuty"),
    "grafana": ("📊", "Grafana"),
    "new_relic": ("🔮", "New Relic"),
    "prometheus": ("🔥", "Prometheus"),
    "alertmanager": ("🔥", "Alertmanager"),
    "opsgenie": ("🔔", "Opsgenie"),
    "sentry": ("🐛", "Sentry"),
    "slack": ("💬", "Slack"),
    "email": ("📧", "Email"),
    "jira": ("📋", "Jira"),
    "cloud_watch": ("☁", "CloudWatch"),
    "cloudwatch": ("☁", "CloudWatch"),
    "generic_webhook": ("📡", "Generic Webhook"),
    "manual": ("✋", "Manual"),
}


def alert_source_icon(source: str) -> str:
    return ALERT_SOURCES.get(source, ("📡", source))[0]


def alert_source_name(source: str) -> str:
    return ALERT_SOURCES.get(source, ("", source))[1]


# =============================================================================
# Section builders
# =============================================================================


def detail_row(label: str, value: str) -> str:
    return f"{label}: {value}"


def bullet_section(title: str, items: Iterable[str]) -> List[str]:
    """A titled bullet list followed by a blank line; empty when there are no items."""
    items = [i for i in items if i]
    if not items:
        return []
    return [title] + [f"  • {item}" for item in items] + [""]
