"""Cross-repository issue references: titles, numbers and URLs."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from projsync.board.models import ProjectItem
from projsync.exceptions import AmbiguousTitleError, ItemNotFoundError

logger = logging.getLogger("projsync.xref")

_ISSUE_NUMBER_RE = re.compile(r"issues/(\d+)")


def extract_issue_number(url: str | None) -> int | None:
    """Trailing issue number of an `.../issues/<n>` URL, or None."""
    if not url or not isinstance(url, str):
        return None
    match = _ISSUE_NUMBER_RE.search(url)
    return int(match.group(1)) if match else None


class CrossReferenceResolver:
    """Maps issue titles on the target board to items and issue numbers.

    When several items share a title the first one in listing order wins,
    unless `strict` is set, in which case the lookup raises
    AmbiguousTitleError.
    """

    def __init__(
        self,
        items: Iterable[ProjectItem],
        target_owner: str,
        target_repo: str,
        source_prefix: str = "https://github.com/",
        strict: bool = False,
    ) -> None:
        self.target_owner = target_owner
        self.target_repo = target_repo
        self.source_prefix = source_prefix
        self.strict = strict
        self._items: dict[str, ProjectItem] = {}
        self._duplicates: set[str] = set()

        for item in items:
            if item.content is None:
                continue
            title = item.content.title
            if title in self._items:
                self._duplicates.add(title)
                continue
            self._items[title] = item

        if self._duplicates:
            logger.warning(
                "%d title(s) appear on more than one item; first match is used: %s",
                len(self._duplicates),
                sorted(self._duplicates),
            )

    def find_item(self, title: str) -> ProjectItem:
        """Get the project item for an issue title.

        Raises:
            ItemNotFoundError: If no item has that title
            AmbiguousTitleError: If strict and more than one item has it
        """
        if self.strict and title in self._duplicates:
            raise AmbiguousTitleError(f"Issue title '{title}' matches more than one project item")
        item = self._items.get(title)
        if item is None:
            raise ItemNotFoundError(f"Issue titled '{title}' not found in project.")
        return item

    def number_for(self, title: str) -> int | None:
        item = self._items.get(title)
        return item.content.number if item and item.content else None

    def target_url(self, number: int) -> str:
        return f"https://github.com/{self.target_owner}/{self.target_repo}/issues/{number}"

    def rewrite_reference_url(self, raw_url: str, title: str) -> str:
        """Point a source-repository URL at the same-titled issue in the target.

        Returns the input unchanged when it is not a source URL or the title
        has no issue on the target board.
        """
        if not isinstance(raw_url, str) or not raw_url.startswith(self.source_prefix):
            return raw_url
        number = self.number_for(title)
        if number is None:
            return raw_url
        return self.target_url(number)
