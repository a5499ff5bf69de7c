"""Front matter assembly and YAML serialization"""

from enum import Enum
from typing import Any, Mapping

import yaml

from wpjekyll.core.models import PostItem


class SeoOverride(str, Enum):
    """Post meta keys (Yoast SEO) that override the page title/description."""
    TITLE = '_yoast_wpseo_title'
    DESCRIPTION = '_yoast_wpseo_metadesc'


def seo_overrides(meta: Mapping[str, str]) -> dict[SeoOverride, str]:
    """Return the recognized, non-blank override values found in meta."""
    return {key: meta[key.value] for key in SeoOverride if meta.get(key.value, '').strip()}


def build_front_matter(
    item: PostItem,
    authors: Mapping[str, str],
    include_meta: bool = False,
    ) -> dict[str, Any]:
    """Ordered front matter for item: fixed keys, then excerpt/meta when present/enabled."""
    overrides = seo_overrides(item.meta_pairs)
    fm: dict[str, Any] = {
        'layout':           item.post_type,
        'title':            item.title,
        'page_title':       overrides.get(SeoOverride.TITLE, item.title),
        'page_description': overrides.get(SeoOverride.DESCRIPTION),
        'date':             item.published_at,
        'type':             item.post_type,
        'published':        item.is_published,
        'categories':       list(item.categories),
        'tags':             list(item.tags),
        'author':           authors.get(item.author_login),
    }
    if item.excerpt is not None:
        fm['excerpt'] = item.excerpt
    if include_meta:
        fm['meta'] = dict(item.meta_pairs)
    return fm


def dump_front_matter(fm: Mapping[str, Any]) -> str:
    """YAML with insertion order kept and scalar lists in flow style (categories: [news])."""
    return yaml.dump(dict(fm), default_flow_style=None, allow_unicode=True, sort_keys=False)
