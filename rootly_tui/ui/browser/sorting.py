"""Sort state and the sort menu overlay."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from ..rendering import RenderContext
from .events import Key

logger = logging.getLogger(__name__)


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def indicator(self) -> str:
        return "↑" if self is SortDirection.ASC else "↓"


@dataclass
class SortState:
    """Sort applied to list requests. Survives page loads."""

    field: Optional[str] = None
    direction: SortDirection = SortDirection.DESC
    enabled: bool = False

    def toggle(self, field: str) -> None:
        """Same field flips direction; a different field starts descending."""
        if self.enabled and field == self.field:
            self.direction = (
                SortDirection.ASC if self.direction is SortDirection.DESC else SortDirection.DESC
            )
        else:
            self.field = field
            self.direction = SortDirection.DESC
            self.enabled = True
        logger.info("Sort set to %s %s", self.field, self.direction.value)

    @property
    def sort_param(self) -> Optional[str]:
        """The API `sort` parameter, e.g. "-created_at" for descending."""
        if not self.enabled or not self.field:
            return None
        prefix = "-" if self.direction is SortDirection.DESC else ""
        return f"{prefix}{self.field}"

    @property
    def indicator(self) -> str:
        return self.direction.indicator if self.enabled else ""


@dataclass(frozen=True)
class SortOption:
    label: str
    description: str
    value: str


class SortOverlay:
    """Modal menu for picking a sort field. Owns all keys while visible."""

    def __init__(self, options: Sequence[SortOption]) -> None:
        self.options: List[SortOption] = list(options)
        self.visible = False
        self.highlight = 0

    def open(self) -> None:
        self.visible = True
        self.highlight = 0

    def cancel(self) -> None:
        self.visible = False

    def move_highlight(self, delta: int) -> None:
        if not self.options:
            return
        self.highlight = max(0, min(self.highlight + delta, len(self.options) - 1))

    def confirm(self) -> Optional[str]:
        """Close and return the highlighted option's value."""
        self.visible = False
        if not self.options:
            return None
        return self.options[self.highlight].value

    def handle_key(self, key: Key) -> Optional[str]:
        """Apply one key. Returns the chosen value when a choice is confirmed."""
        if key is Key.DOWN:
            self.move_highlight(1)
        elif key is Key.UP:
            self.move_highlight(-1)
        elif key is Key.TOP:
            self.highlight = 0
        elif key is Key.BOTTOM:
            self.move_highlight(len(self.options))
        elif key is Key.ENTER:
            return self.confirm()
        elif key in (Key.ESCAPE, Key.QUIT, Key.SORT):
            self.cancel()
        return None

    def render(self, state: SortState, ctx: RenderContext) -> List[str]:
        lines = [ctx.t("sort.title"), ""]
        for i, option in enumerate(self.options):
            marker = "▶" if i == self.highlight else " "
            current = ""
            if state.enabled and state.field == option.value:
                order = ctx.t("sort.newest_first" if state.direction is SortDirection.DESC else "sort.oldest_first")
                current = f" {state.indicator} ({order})"
            lines.append(f"{marker} {option.label}{current}")
            lines.append(f"    {option.description}")
        lines.extend(["", ctx.t("sort.hints")])
        return lines
