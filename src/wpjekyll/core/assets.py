"""Asset resolution: rewrite embedded image references and download them to a local cache.

The tree passes never mutate their input; each returns a rewritten copy.

Fetching is best effort. A failed download is logged and recorded as an
AssetResult, never raised, and by default the rewritten src stays in the body
even though the file is missing from the cache.
"""

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import unquote, urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from wpjekyll.core.errors import AssetFetchError


logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
USER_AGENT = 'wpjekyll'
_UNSAFE_NAMES = ('', '.', '..')
_UNSAFE_CHARS = ('/', '\\', '\x00')


class AssetStatus(str, Enum):
    fetched = 'fetched'
    cached = 'cached'
    failed = 'failed'
    skipped = 'skipped'


@dataclass(frozen=True)
class AssetRef:
    """One rewritten <img>: where it pointed, and the cache file name it now refers to."""
    original_src: str
    new_src: str
    file_name: str


@dataclass(frozen=True)
class AssetResult:
    ref: AssetRef
    status: AssetStatus
    error: Optional[str] = None


def asset_file_name(src: str) -> str:
    """Base file name of an asset URL, query and fragment dropped.

    Returns '' for data: URIs and unparseable URLs, and for any name that would
    not stay inside the cache directory.
    """
    if not src or src.startswith('data:'):
        return ''
    try:
        path = urlparse(src).path
    except ValueError:
        return ''
    # Decode first: an encoded %2F must not survive as a path separator.
    name = PurePosixPath(unquote(path)).name
    if name in _UNSAFE_NAMES or any(c in name for c in _UNSAFE_CHARS):
        return ''
    return name


def asset_url(file_name: str, assets_folder: str, url_prefix: str = '') -> str:
    return f"{url_prefix.rstrip('/')}/{assets_folder.strip('/')}/{file_name}"


# --- tree passes ---

def strip_hero_image(tree: BeautifulSoup) -> BeautifulSoup:
    """Return a copy of tree without its first <img>."""
    tree = copy.copy(tree)
    first = tree.find('img')
    if first is not None:
        first.decompose()
    return tree


def rewrite_asset_refs(
    tree: BeautifulSoup,
    assets_folder: str,
    url_prefix: str = '',
    ) -> tuple[BeautifulSoup, list[AssetRef]]:
    """Return (rewritten copy, refs) with every fetchable <img src> pointing into assets_folder."""
    tree = copy.copy(tree)
    refs = []
    for img in tree.find_all('img', src=True):
        src = img['src'].strip()
        name = asset_file_name(src)
        if not name:
            continue
        new_src = asset_url(name, assets_folder, url_prefix)
        img['src'] = new_src
        # Responsive variants still point at the old host.
        for attr in ('srcset', 'sizes'):
            if img.has_attr(attr):
                del img[attr]
        refs.append(AssetRef(original_src=src, new_src=new_src, file_name=name))
    return tree, refs


def revert_asset_refs(tree: BeautifulSoup, refs: list[AssetRef]) -> BeautifulSoup:
    """Return a copy of tree with the given refs pointing back at their original URLs."""
    tree = copy.copy(tree)
    originals = {}
    for ref in refs:
        originals.setdefault(ref.new_src, []).append(ref.original_src)
    for img in tree.find_all('img', src=True):
        pending = originals.get(img['src'])
        if pending:
            img['src'] = pending.pop(0)
    return tree


# --- fetching ---

def is_safe_redirect(from_url: str, to_url: str) -> bool:
    """Same-scheme hops and http -> https upgrades only."""
    src, dst = urlparse(from_url).scheme.lower(), urlparse(to_url).scheme.lower()
    return src == dst or (src == 'http' and dst == 'https')


class AssetFetcher:
    """Download assets over HTTP(S) with a per-request timeout and safe redirects only."""

    def __init__(self, session: requests.Session = None, timeout: float = 30.0, max_redirects: int = 5):
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', USER_AGENT)
        self.timeout = timeout
        self.max_redirects = max_redirects

    def close(self) -> None:
        self.session.close()

    def _open(self, url: str) -> requests.Response:
        current = url
        for _ in range(self.max_redirects + 1):
            resp = self.session.get(current, timeout=self.timeout, allow_redirects=False, stream=True)
            if not resp.is_redirect:
                if not resp.ok:
                    resp.close()
                    resp.raise_for_status()
                return resp
            target = urljoin(current, resp.headers['location'])
            resp.close()
            if not is_safe_redirect(current, target):
                raise AssetFetchError(url, f"unsafe redirect {current} -> {target}")
            current = target
        raise AssetFetchError(url, f"more than {self.max_redirects} redirects")

    def fetch(self, url: str, dest: Path) -> Path:
        """Write the body at url to dest. Raises AssetFetchError on any failure."""
        dest = Path(dest)
        partial = dest.with_name(dest.name + '.part')
        try:
            resp = self._open(url)
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                with partial.open('wb') as f:
                    for chunk in resp.iter_content(CHUNK_SIZE):
                        f.write(chunk)
            finally:
                resp.close()
            partial.replace(dest)
        except AssetFetchError:
            raise
        except (requests.RequestException, ValueError) as e:
            partial.unlink(missing_ok=True)
            raise AssetFetchError(url, str(e)) from e
        except OSError as e:
            partial.unlink(missing_ok=True)
            raise AssetFetchError(url, f"cannot write {dest}: {e}") from e
        return dest


def resolve_assets(
    refs: list[AssetRef],
    cache_dir: Path,
    fetcher: Optional[AssetFetcher],
    title: str = '',
    ) -> list[AssetResult]:
    """Fetch each ref into cache_dir unless already cached. Never raises for a single asset.

    With fetcher=None every ref is reported as skipped and the cache is not touched.
    """
    if fetcher is None:
        return [AssetResult(ref, AssetStatus.skipped) for ref in refs]
    if refs:
        logger.info("Downloading images for %s", title)

    results = []
    for ref in refs:
        dest = Path(cache_dir) / ref.file_name
        logger.info("  %s", ref.original_src)
        if dest.exists():
            logger.info("    Already in cache. Clean %s if you want a redownload.", cache_dir)
            results.append(AssetResult(ref, AssetStatus.cached))
            continue
        try:
            fetcher.fetch(ref.original_src, dest)
        except AssetFetchError as e:
            logger.error("    Error: %s", e.reason)
            results.append(AssetResult(ref, AssetStatus.failed, e.reason))
            continue
        logger.info("    OK!")
        results.append(AssetResult(ref, AssetStatus.fetched))
    return results
