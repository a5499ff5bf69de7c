"""Output writing: front matter + Markdown body -> {directory_name}/{file_name}"""

from pathlib import Path
from typing import Any, Mapping

from wpjekyll.core.frontmatter import dump_front_matter
from wpjekyll.core.models import PostItem


def render_document(front_matter: Mapping[str, Any], body: str) -> str:
    """Return the file content: YAML front matter block, delimiter, body."""
    return f"---\n{dump_front_matter(front_matter)}---\n\n{body}\n"


def item_path(output_dir: Path, item: PostItem) -> Path:
    return Path(output_dir) / item.directory_name / item.file_name


def write_item(
    output_dir: Path,
    item: PostItem,
    front_matter: Mapping[str, Any],
    body: str,
    ) -> Path:
    """Write item's file under output_dir, creating directories and overwriting any existing file."""
    path = item_path(output_dir, item)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_document(front_matter, body), encoding='utf-8')
    return path
