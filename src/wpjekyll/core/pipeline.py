"""Pipeline orchestration: load export, import each item, tally results"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from wpjekyll.config import Settings
from wpjekyll.core.assets import AssetFetcher
from wpjekyll.core.content import transform_content
from wpjekyll.core.errors import ItemTransformError
from wpjekyll.core.frontmatter import build_front_matter
from wpjekyll.core.models import PostItem
from wpjekyll.core.parse import load_export
from wpjekyll.core.report import ImportReport
from wpjekyll.core.writer import item_path, write_item


logger = logging.getLogger(__name__)


def _describe_file_name(item: PostItem) -> str:
    """Best-effort file name for diagnostics when the real derivation itself failed."""
    try:
        return item.file_name
    except ValueError:
        return f"{item.permalink_slug}.markdown (undated)"


def import_item(
    item: PostItem,
    authors: Mapping[str, str],
    settings: Settings,
    fetcher: Optional[AssetFetcher] = None,
    ) -> Path:
    """Build front matter, convert the body, and write the file. Returns the written path."""
    front_matter = build_front_matter(item, authors, settings.include_meta)
    content = transform_content(
        item.content_html,
        cache_dir=settings.assets_dir,
        assets_folder=settings.assets_folder,
        url_prefix=settings.asset_url_prefix,
        strip_hero=settings.strip_hero_image,
        fetcher=fetcher,
        revert_failed=settings.revert_failed_assets,
        title=item.title,
    )
    return write_item(Path(settings.output_dir), item, front_matter, content.markdown)


def run_import(settings: Settings, fetcher: Optional[AssetFetcher] = None) -> ImportReport:
    """Import every item of settings.source. MalformedExportError aborts; item errors are recorded.

    A fetcher is created (and closed) here when downloads are enabled and none is passed in.
    """
    doc = load_export(Path(settings.source))
    logger.info("Loaded %d item(s) and %d author(s) from %s", len(doc.items), len(doc.authors), settings.source)

    owns_fetcher = fetcher is None and settings.fetch_images
    if owns_fetcher:
        fetcher = AssetFetcher(timeout=settings.fetch_timeout, max_redirects=settings.max_redirects)
    if not settings.fetch_images:
        fetcher = None

    report = ImportReport()
    try:
        for record in doc.items:
            item = PostItem(record)
            try:
                path = import_item(item, doc.authors, settings, fetcher)
            except Exception as e:
                report.record_failure(
                    item.post_type, ItemTransformError(item.title, _describe_file_name(item), e),
                )
                continue
            report.record_success(item, path)
    finally:
        if owns_fetcher:
            fetcher.close()
    return report


def plan_import(settings: Settings) -> list[tuple[PostItem, Optional[Path], Optional[str]]]:
    """Dry run: (item, target path, derivation error) per item. Writes nothing."""
    doc = load_export(Path(settings.source))
    plan = []
    for record in doc.items:
        item = PostItem(record)
        try:
            plan.append((item, item_path(Path(settings.output_dir), item), None))
        except ValueError as e:
            plan.append((item, None, str(e)))
    return plan
