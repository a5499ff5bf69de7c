"""Export parsing: WXR document -> ExportDocument (authors + item records)"""

import logging
from pathlib import Path
from typing import Union

from lxml import etree

from wpjekyll.core.errors import MalformedExportError
from wpjekyll.core.models import ExportDocument, ItemRecord


logger = logging.getLogger(__name__)

# WXR 1.2 defaults; the document's own declarations win so 1.0/1.1 exports parse too.
DEFAULT_NAMESPACES = {
    'wp':      'http://wordpress.org/export/1.2/',
    'content': 'http://purl.org/rss/1.0/modules/content/',
    'excerpt': 'http://wordpress.org/export/1.2/excerpt/',
    'dc':      'http://purl.org/dc/elements/1.1/',
}


def _namespaces(root: etree._Element) -> dict[str, str]:
    ns = dict(DEFAULT_NAMESPACES)
    ns.update({prefix: uri for prefix, uri in root.nsmap.items() if prefix})
    return ns


def _text(node: etree._Element, path: str, ns: dict[str, str]) -> str:
    return node.findtext(path, default='', namespaces=ns) or ''


def _parse_authors(channel: etree._Element, ns: dict[str, str]) -> dict[str, str]:
    """Return login -> display name. Author metadata is optional: any failure yields {}."""
    try:
        authors = {}
        for author in channel.iterfind('wp:author', namespaces=ns):
            login = _text(author, 'wp:author_login', ns).strip()
            if login:
                authors[login] = _text(author, 'wp:author_display_name', ns)
        return authors
    except (etree.LxmlError, SyntaxError, ValueError) as e:
        logger.warning("Could not read the author table, continuing without authors: %s", e)
        return {}


def _parse_item(node: etree._Element, ns: dict[str, str]) -> ItemRecord:
    categories, tags = [], []
    for cat in node.iterfind('category'):
        domain = cat.get('domain')
        if domain == 'category':
            categories.append(cat.text or '')
        elif domain == 'post_tag':
            tags.append(cat.text or '')

    meta = [
        (_text(m, 'wp:meta_key', ns), _text(m, 'wp:meta_value', ns))
        for m in node.iterfind('wp:postmeta', namespaces=ns)
    ]

    return ItemRecord(
        post_id=_text(node, 'wp:post_id', ns),
        title=_text(node, 'title', ns),
        post_name=_text(node, 'wp:post_name', ns),
        status=_text(node, 'wp:status', ns),
        post_type=_text(node, 'wp:post_type', ns),
        post_date=_text(node, 'wp:post_date', ns),
        pub_date=_text(node, 'pubDate', ns),
        creator=_text(node, 'dc:creator', ns),
        excerpt_html=_text(node, 'excerpt:encoded', ns),
        content_html=_text(node, 'content:encoded', ns),
        categories=categories,
        tags=tags,
        meta=meta,
    )


def parse_export(text: Union[str, bytes]) -> ExportDocument:
    """Parse WXR markup into an ExportDocument. Raises MalformedExportError if unparseable."""
    if isinstance(text, str):
        text = text.encode('utf-8')
    if not text.strip():
        raise MalformedExportError("Export document is empty")

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        root = etree.fromstring(text, parser=parser)
    except etree.XMLSyntaxError as e:
        raise MalformedExportError(f"Export is not well-formed XML: {e}") from e

    channel = root if root.tag == 'channel' else root.find('channel')
    if channel is None:
        raise MalformedExportError(f"Export has no <channel> element (root is <{root.tag}>)")

    ns = _namespaces(root)
    return ExportDocument(
        items=[_parse_item(node, ns) for node in channel.iterfind('item')],
        authors=_parse_authors(channel, ns),
    )


def load_export(path: Path) -> ExportDocument:
    """Read and parse the export at path."""
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise MalformedExportError(f"Cannot read export {path}: {e}") from e
    return parse_export(raw)
