"""Body conversion: post HTML -> rewritten tree -> auto-paragraphs -> Markdown"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup
from markdownify import markdownify

from wpjekyll.core.assets import (
    AssetFetcher,
    AssetResult,
    AssetStatus,
    resolve_assets,
    revert_asset_refs,
    rewrite_asset_refs,
    strip_hero_image,
)
from wpjekyll.core.utils.autop import wpautop


@dataclass
class TransformedContent:
    markdown: str
    assets: list[AssetResult] = field(default_factory=list)


def html_to_markdown(html: str) -> str:
    """Convert normalized HTML to Markdown and clean up leftover non-breaking spaces."""
    text = markdownify(html, heading_style='ATX')
    return text.replace('&nbsp;', ' ').replace('\xa0', ' ').strip()


def transform_content(
    html: str,
    cache_dir: Path,
    assets_folder: str = 'assets',
    url_prefix: str = '',
    strip_hero: bool = True,
    fetcher: Optional[AssetFetcher] = None,
    revert_failed: bool = False,
    title: str = '',
    ) -> TransformedContent:
    """Run the asset passes on the HTML tree, then wpautop and convert to Markdown.

    fetcher=None disables downloads; references are rewritten either way.
    """
    if not html.strip():
        return TransformedContent(markdown='')

    tree = BeautifulSoup(html, 'html.parser')
    if strip_hero:
        tree = strip_hero_image(tree)
    tree, refs = rewrite_asset_refs(tree, assets_folder, url_prefix)
    results = resolve_assets(refs, cache_dir, fetcher, title=title)

    if revert_failed:
        failed = [r.ref for r in results if r.status == AssetStatus.failed]
        if failed:
            tree = revert_asset_refs(tree, failed)

    return TransformedContent(markdown=html_to_markdown(wpautop(str(tree))), assets=results)
