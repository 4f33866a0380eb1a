"""Alert rendering and the alert adapter for the browser core."""

from typing import List, Sequence

from ..models import Alert, merge_detail
from .browser.sorting import SortOption
from .rendering import (
    RenderContext,
    alert_source_icon,
    alert_source_name,
    bullet_section,
    detail_row,
)

DEDUP_KEY_MAX = 40


def _one_line(text: str) -> str:
    return text.replace("\r", "").replace("\n", " ").strip()


def noise_label(noise: str, ctx: RenderContext) -> str:
    if noise in ("not_noise", "noise", "possible_noise"):
        return ctx.t(f"alerts.noise.{noise}")
    return noise


class AlertAdapter:
    """Teaches the browser controller how to handle alerts. Alerts are not sortable."""

    title_key = "alerts.title"
    empty_key = "alerts.none_found"
    select_prompt_key = "alerts.select_prompt"

    def sort_options(self, ctx: RenderContext) -> Sequence[SortOption]:
        return []

    def item_id(self, item: Alert) -> str:
        return item.id

    def detail_loaded(self, item: Alert) -> bool:
        return item.detail_loaded

    def merge_detail(self, summary: Alert, detail: Alert) -> Alert:
        return merge_detail(summary, detail)

    def url(self, item: Alert) -> str:
        return item.rootly_url

    def list_row(self, item: Alert, ctx: RenderContext) -> str:
        ident = item.short_id or "---"
        status = (item.status or "-")[:10]
        when = ctx.relative(item.started_at or item.created_at) or "-"
        return (
            f"{alert_source_icon(item.source)} {ident:<8} {status:<10} "
            f"{when:>8}  {_one_line(item.summary)}"
        )

    def detail_text(self, item: Alert, ctx: RenderContext, loading: bool) -> str:
        return "\n".join(render_alert_detail(item, ctx, loading))


def render_alert_detail(alert: Alert, ctx: RenderContext, loading: bool) -> List[str]:
    lines: List[str] = []

    summary = _one_line(alert.summary)
    lines.append(f"[{alert.short_id}] {summary}" if alert.short_id else summary)
    lines.append("")

    header = (
        f"{ctx.t('alerts.detail.source')}: {alert_source_icon(alert.source)} "
        f"{alert_source_name(alert.source)}  {ctx.t('incidents.detail.status')}: {alert.status}"
    )
    if alert.created_at is not None:
        header += "  " + ctx.t("alerts.triggered", when=ctx.relative(alert.created_at))
    lines.extend([header, ""])

    if alert.rootly_url or alert.external_url:
        lines.append(ctx.t("alerts.detail.links"))
        if alert.rootly_url:
            lines.append(detail_row(ctx.t("incidents.links.rootly"), alert.rootly_url))
        if alert.external_url:
            lines.append(detail_row(ctx.t("alerts.detail.source"), alert.external_url))
        lines.append("")

    if alert.description.strip():
        lines.append(ctx.t("incidents.detail.description"))
        lines.extend(alert.description.replace("\r", "").strip().split("\n"))
        lines.append("")

    lines.append(ctx.t("incidents.timeline.title"))
    if alert.created_at is not None:
        lines.append(detail_row(ctx.t("incidents.timeline.created"), ctx.format_time(alert.created_at)))
    if alert.started_at is not None:
        lines.append(detail_row(ctx.t("incidents.timeline.started"), ctx.format_time(alert.started_at)))
    if alert.ended_at is not None:
        lines.append(detail_row(ctx.t("alerts.detail.ended"), ctx.format_time(alert.ended_at)))
    lines.append("")

    lines.extend(bullet_section(ctx.t("incidents.detail.services"), alert.services))
    lines.extend(bullet_section(ctx.t("incidents.detail.environments"), alert.environments))
    lines.extend(bullet_section(ctx.t("incidents.detail.teams"), alert.groups))

    if alert.detail_loaded:
        if alert.urgency:
            lines.extend([detail_row(ctx.t("alerts.detail.urgency"), alert.urgency), ""])
        lines.extend(bullet_section(ctx.t("alerts.detail.responders"), alert.responders))
        lines.extend(
            bullet_section(
                ctx.t("alerts.detail.notified_users"),
                (u.display for u in alert.notified_users),
            )
        )
        lines.extend(
            bullet_section(
                ctx.t("alerts.detail.related_incidents"),
                (f"{i.label} - {i.title} ({i.status})" for i in alert.related_incidents),
            )
        )

        metadata = []
        if alert.external_id:
            metadata.append(detail_row(ctx.t("alerts.detail.external_id"), alert.external_id))
        if alert.noise:
            metadata.append(detail_row(ctx.t("alerts.detail.noise"), noise_label(alert.noise, ctx)))
        if alert.is_group_leader_alert:
            metadata.append(detail_row(ctx.t("alerts.detail.group_leader"), ctx.t("common.yes")))
        if alert.deduplication_key:
            key = alert.deduplication_key
            if len(key) > DEDUP_KEY_MAX:
                key = key[:DEDUP_KEY_MAX] + "..."
            metadata.append(detail_row(ctx.t("alerts.detail.dedup_key"), key))
        if metadata:
            lines.append(ctx.t("alerts.detail.metadata"))
            lines.extend(f"  {row}" for row in metadata)
            lines.append("")

    if alert.labels:
        lines.append(ctx.t("alerts.detail.labels"))
        for name in sorted(alert.labels):
            lines.append(f"  {name}: {alert.labels[name]}")
        lines.append("")

    if loading:
        lines.extend(["", f"⠋ {ctx.t('incidents.loading_details')}"])
    elif not alert.detail_loaded:
        lines.extend(["", ctx.t("incidents.press_enter")])

    return lines
