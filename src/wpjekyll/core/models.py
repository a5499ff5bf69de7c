"""Export records and the per-item model with its derived identity fields"""

from dataclasses import dataclass
from datetime import datetime
from email.utils import parsedate_to_datetime
from functools import cached_property
from typing import Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict

from wpjekyll.core.utils.slug import slugify


UNCATEGORIZED = 'uncategorized'
DRAFTS_DIR = '_drafts'
FILE_EXT = 'markdown'
WP_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ItemRecord(BaseModel):
    """Raw strings for one <item> of the export; missing fields are empty."""
    model_config = ConfigDict(frozen=True)

    post_id:      str = ''
    title:        str = ''
    post_name:    str = ''
    status:       str = ''
    post_type:    str = ''
    post_date:    str = ''
    pub_date:     str = ''
    creator:      str = ''
    excerpt_html: str = ''
    content_html: str = ''
    categories:   list[str] = []
    tags:         list[str] = []
    meta:         list[tuple[str, str]] = []


class ExportDocument(BaseModel):
    """Parsed export: items in document order plus the author login -> display name table."""
    model_config = ConfigDict(frozen=True)

    items:   list[ItemRecord] = []
    authors: dict[str, str] = {}


@dataclass(frozen=True)
class PostItem:
    """One post, page, or custom item. Derived fields are computed once on first access."""
    record: ItemRecord

    @cached_property
    def title(self) -> str:
        return self.record.title.strip()

    @cached_property
    def status(self) -> str:
        return self.record.status.strip()

    @cached_property
    def post_type(self) -> str:
        return self.record.post_type.strip()

    @cached_property
    def author_login(self) -> str:
        return self.record.creator.strip()

    @cached_property
    def is_published(self) -> bool:
        return self.status == 'publish'

    @cached_property
    def permalink_slug(self) -> str:
        """Explicit post_name, else the slugified title; never empty."""
        explicit = self.record.post_name.strip()
        if explicit:
            return explicit
        derived = slugify(self.title)
        if derived:
            return derived
        post_id = self.record.post_id.strip()
        return f"{self.post_type or 'item'}-{post_id}" if post_id else 'untitled'

    @cached_property
    def published_at(self) -> Optional[datetime]:
        """Publish timestamp; None unless published. Raises ValueError when no date parses."""
        if not self.is_published:
            return None
        post_date = self.record.post_date.strip()
        try:
            return datetime.strptime(post_date, WP_DATE_FORMAT)
        except ValueError:
            pass
        pub_date = self.record.pub_date.strip()
        if pub_date:
            try:
                return parsedate_to_datetime(pub_date).replace(tzinfo=None)
            except (TypeError, ValueError):
                pass
        raise ValueError(f"no usable publish date (post_date={post_date!r}, pubDate={pub_date!r})")

    @cached_property
    def file_name(self) -> str:
        if self.is_published:
            return f"{self.published_at:%Y-%m-%d}-{self.permalink_slug}.{FILE_EXT}"
        return f"{self.permalink_slug}.{FILE_EXT}"

    @cached_property
    def directory_name(self) -> str:
        # Naive pluralization: post -> _posts, page -> _pages.
        if not self.is_published and self.post_type == 'post':
            return DRAFTS_DIR
        return f"_{self.post_type}s"

    @cached_property
    def excerpt(self) -> Optional[str]:
        if not self.record.excerpt_html.strip():
            return None
        text = BeautifulSoup(self.record.excerpt_html, 'html.parser').get_text().strip()
        return text or None

    @cached_property
    def categories(self) -> tuple[str, ...]:
        slugs = (slugify(name) for name in self.record.categories)
        return tuple(dict.fromkeys(s for s in slugs if s and s != UNCATEGORIZED))

    @cached_property
    def tags(self) -> tuple[str, ...]:
        names = (name.strip() for name in self.record.tags)
        return tuple(dict.fromkeys(n for n in names if n))

    @cached_property
    def meta_pairs(self) -> dict[str, str]:
        return dict(self.record.meta)

    @property
    def content_html(self) -> str:
        return self.record.content_html
