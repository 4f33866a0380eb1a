"""Incident rendering and the incident adapter for the browser core."""

from typing import List, Sequence

from ..models import Incident, merge_detail
from ..utils.datetime_utils import format_duration
from .browser.sorting import SortOption
from .rendering import (
    RenderContext,
    bullet_section,
    detail_row,
    severity_signal,
    status_dot,
)

SORT_FIELDS = (
    ("created_at", "incidents.sort.created", "incidents.sort.created_desc"),
    ("updated_at", "incidents.sort.updated", "incidents.sort.updated_desc"),
    ("started_at", "incidents.sort.started", "incidents.sort.started_desc"),
)


def _one_line(text: str) -> str:
    return text.replace("\r", "").replace("\n", " ").strip()


class IncidentAdapter:
    """Teaches the browser controller how to handle incidents."""

    title_key = "incidents.title"
    empty_key = "incidents.none_found"
    select_prompt_key = "incidents.select_prompt"

    def sort_options(self, ctx: RenderContext) -> Sequence[SortOption]:
        return [
            SortOption(label=ctx.t(label), description=ctx.t(desc), value=value)
            for value, label, desc in SORT_FIELDS
        ]

    def item_id(self, item: Incident) -> str:
        return item.id

    def detail_loaded(self, item: Incident) -> bool:
        return item.detail_loaded

    def merge_detail(self, summary: Incident, detail: Incident) -> Incident:
        return merge_detail(summary, detail)

    def url(self, item: Incident) -> str:
        return item.rootly_url

    def list_row(self, item: Incident, ctx: RenderContext) -> str:
        ident = item.sequential_id or "---"
        status = (item.status or "-")[:10]
        title = _one_line(item.title or item.summary)
        return f"{severity_signal(item.severity)} {ident:<9} {status_dot(status)} {status:<10} {title}"

    def detail_text(self, item: Incident, ctx: RenderContext, loading: bool) -> str:
        return "\n".join(render_incident_detail(item, ctx, loading))


def render_incident_detail(inc: Incident, ctx: RenderContext, loading: bool) -> List[str]:
    lines: List[str] = []

    title = _one_line(inc.title or inc.summary)
    lines.append(f"[{inc.sequential_id}] {title}" if inc.sequential_id else title)
    lines.append("")

    header = (
        f"{ctx.t('incidents.detail.status')}: {inc.status}  "
        f"{ctx.t('incidents.detail.severity')}: {severity_signal(inc.severity)} {inc.severity or '-'}"
    )
    if inc.created_by and inc.created_by.display:
        header += f"  {ctx.t('incidents.detail.created_by')}: {inc.created_by.display}"
    lines.extend([header, ""])

    lines.append(ctx.t("incidents.detail.links"))
    lines.append(detail_row(ctx.t("incidents.links.rootly"), inc.rootly_url))
    if inc.slack_channel_url:
        lines.append(detail_row(ctx.t("incidents.links.slack"), inc.slack_channel_url))
    if inc.jira_issue_url:
        lines.append(detail_row(ctx.t("incidents.links.jira"), inc.jira_issue_url))
    lines.append("")

    summary = inc.summary.replace("\r", "").strip()
    if summary and summary != title:
        lines.append(ctx.t("incidents.detail.description"))
        lines.extend(summary.split("\n"))
        lines.append("")

    lines.append(ctx.t("incidents.timeline.title"))
    for key, value in (
        ("created", inc.created_at),
        ("started", inc.started_at),
        ("detected", inc.detected_at),
        ("acknowledged", inc.acknowledged_at),
        ("mitigated", inc.mitigated_at),
        ("resolved", inc.resolved_at),
    ):
        if value is not None:
            lines.append(detail_row(ctx.t(f"incidents.timeline.{key}"), ctx.format_time(value)))
    duration = format_duration(inc.started_at or inc.created_at, inc.resolved_at)
    if duration:
        lines.append(detail_row(ctx.t("incidents.timeline.duration"), duration))
    lines.append("")

    lines.extend(bullet_section(ctx.t("incidents.detail.services"), inc.services))
    lines.extend(bullet_section(ctx.t("incidents.detail.environments"), inc.environments))
    lines.extend(bullet_section(ctx.t("incidents.detail.teams"), inc.teams))

    if inc.detail_loaded:
        roles = [r for r in inc.roles if r.user.display.strip()]
        if roles:
            lines.append(ctx.t("incidents.detail.roles"))
            lines.extend(detail_row(f"  {r.name}", r.user.display) for r in roles)
            lines.append("")
        lines.extend(bullet_section(ctx.t("incidents.detail.causes"), inc.causes))
        lines.extend(bullet_section(ctx.t("incidents.detail.types"), inc.incident_types))
        lines.extend(bullet_section(ctx.t("incidents.detail.functionalities"), inc.functionalities))

    if loading:
        lines.extend(["", f"⠋ {ctx.t('incidents.loading_details')}"])
    elif not inc.detail_loaded:
        lines.extend(["", ctx.t("incidents.press_enter")])

    return lines
