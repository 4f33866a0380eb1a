"""The per-collection capabilities the browser controller is generic over."""

from typing import Protocol, Sequence, TypeVar

from ..rendering import RenderContext
from .sorting import SortOption

T = TypeVar("T")


class ItemAdapter(Protocol[T]):
    """What the controller needs to know about one kind of item.

    Implemented once for incidents and once for alerts; the controller
    never looks inside an item except through these methods.
    """

    title_key: str
    empty_key: str
    select_prompt_key: str

    def sort_options(self, ctx: RenderContext) -> Sequence[SortOption]:
        """Options for the sort menu; empty when the collection is unsortable."""
        ...

    def item_id(self, item: T) -> str: ...

    def detail_loaded(self, item: T) -> bool: ...

    def merge_detail(self, summary: T, detail: T) -> T:
        """Fold a fetched detail record into the summary from the list page."""
        ...

    def url(self, item: T) -> str: ...

    def list_row(self, item: T, ctx: RenderContext) -> str:
        """One list line (without the selection marker)."""
        ...

    def detail_text(self, item: T, ctx: RenderContext, loading: bool) -> str:
        """Full detail pane text for an item."""
        ...
