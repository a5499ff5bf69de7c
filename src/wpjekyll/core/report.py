"""Import tally: per-item results, per-type counts, and the final summary"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from wpjekyll.core.errors import ItemTransformError
from wpjekyll.core.models import PostItem


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemResult:
    """Outcome of importing one item: a written path, or the reason it was skipped."""
    title: str
    post_type: str
    file_name: str
    path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ImportReport:
    results: list[ItemResult] = field(default_factory=list)

    @property
    def counts(self) -> Counter:
        """Successful imports per post type, in first-seen order."""
        return Counter(r.post_type for r in self.results if r.ok)

    @property
    def failures(self) -> list[ItemResult]:
        return [r for r in self.results if not r.ok]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def record_success(self, item: PostItem, path: Path) -> ItemResult:
        result = ItemResult(item.title, item.post_type, item.file_name, path=path)
        self.results.append(result)
        return result

    def record_failure(self, post_type: str, error: ItemTransformError) -> ItemResult:
        """Record a skipped item and log its title, file name, and error."""
        result = ItemResult(error.title, post_type, error.file_name, error=str(error.cause))
        self.results.append(result)
        logger.error(
            "Couldn't import post!\n  Title: %s\n  Name/Slug: %s\n  Error: %s",
            error.title, error.file_name, error.cause,
        )
        return result

    def summary_lines(self) -> list[str]:
        return [f"Imported {n} {post_type}s" for post_type, n in self.counts.items()]
