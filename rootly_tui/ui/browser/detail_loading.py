"""Which item, if any, has a detail request in flight."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class DetailLoadTracker:
    """Records the single in-flight detail request.

    Only one request is issued at a time; that policy lives in the
    controller. This tracker just remembers the id.
    """

    def __init__(self) -> None:
        self._loading_id: Optional[str] = None

    @property
    def loading_id(self) -> Optional[str]:
        return self._loading_id

    @property
    def busy(self) -> bool:
        return self._loading_id is not None

    def begin_load(self, item_id: str) -> None:
        if self._loading_id is not None and self._loading_id != item_id:
            logger.debug("Detail load for %s replaces %s", item_id, self._loading_id)
        self._loading_id = item_id

    def is_loading(self, item_id: Optional[str]) -> bool:
        return item_id is not None and self._loading_id == item_id

    def complete(self, item_id: Optional[str] = None) -> None:
        """A result arrived. Clears the in-flight id.

        Passing the id of the result leaves a newer load alone when a stale
        result arrives after `clear()`; with no id the reset is unconditional.
        """
        if item_id is None or item_id == self._loading_id:
            self._loading_id = None

    def clear(self) -> None:
        self._loading_id = None
