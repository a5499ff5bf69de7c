"""Root test configuration: WXR builder fixture and a fake HTTP session"""

from dataclasses import dataclass, field
from html import escape

import pytest
import requests
from requests.structures import CaseInsensitiveDict


WXR_HEADER = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
    xmlns:excerpt="http://wordpress.org/export/1.2/excerpt/"
    xmlns:content="http://purl.org/rss/1.0/modules/content/"
    xmlns:dc="http://purl.org/dc/elements/1.1/"
    xmlns:wp="http://wordpress.org/export/1.2/">
<channel>
  <title>Test Blog</title>
"""

WXR_FOOTER = """\
</channel>
</rss>
"""


def wxr_author(login: str, display_name: str) -> str:
    return (
        "  <wp:author>"
        f"<wp:author_login><![CDATA[{login}]]></wp:author_login>"
        f"<wp:author_display_name><![CDATA[{display_name}]]></wp:author_display_name>"
        "</wp:author>\n"
    )


def wxr_item(
    title: str = "Hello",
    status: str = "publish",
    post_type: str = "post",
    post_name: str = "",
    post_date: str = "2020-03-05 10:00:00",
    creator: str = "admin",
    content: str = "",
    excerpt: str = "",
    categories: tuple = (),
    tags: tuple = (),
    meta: tuple = (),
    post_id: str = "1",
    ) -> str:
    """Render one <item> the way WordPress exports it."""
    cats = "".join(
        f'<category domain="category" nicename="x"><![CDATA[{c}]]></category>' for c in categories
    )
    tag_xml = "".join(
        f'<category domain="post_tag" nicename="x"><![CDATA[{t}]]></category>' for t in tags
    )
    meta_xml = "".join(
        f"<wp:postmeta><wp:meta_key><![CDATA[{k}]]></wp:meta_key>"
        f"<wp:meta_value><![CDATA[{v}]]></wp:meta_value></wp:postmeta>"
        for k, v in meta
    )
    return f"""\
  <item>
    <title>{escape(title)}</title>
    <pubDate>Thu, 05 Mar 2020 10:00:00 +0000</pubDate>
    <dc:creator><![CDATA[{creator}]]></dc:creator>
    <content:encoded><![CDATA[{content}]]></content:encoded>
    <excerpt:encoded><![CDATA[{excerpt}]]></excerpt:encoded>
    <wp:post_id>{post_id}</wp:post_id>
    <wp:post_date><![CDATA[{post_date}]]></wp:post_date>
    <wp:post_name><![CDATA[{post_name}]]></wp:post_name>
    <wp:status><![CDATA[{status}]]></wp:status>
    <wp:post_type><![CDATA[{post_type}]]></wp:post_type>
    {cats}{tag_xml}{meta_xml}
  </item>
"""


def build_wxr(items=(), authors=()) -> str:
    return WXR_HEADER + "".join(wxr_author(*a) for a in authors) + "".join(items) + WXR_FOOTER


@pytest.fixture(name="wxr")
def wxr_fixture():
    """Builder for WXR documents: wxr(items=[item(...)], authors=[(login, name)])."""
    return build_wxr


@pytest.fixture(name="item")
def item_fixture():
    """Builder for a single WXR <item> string."""
    return wxr_item


# --- fake HTTP ---

@dataclass
class FakeResponse:
    status_code: int = 200
    body: bytes = b""
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    closed: bool = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def is_redirect(self) -> bool:
        return "location" in self.headers and self.status_code in (301, 302, 303, 307, 308)

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """requests.Session stand-in: routes map URL -> FakeResponse or an exception to raise."""

    def __init__(self, routes: dict = None):
        self.routes = dict(routes or {})
        self.headers = {}
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status_code=404)
        if isinstance(route, Exception):
            raise route
        return route

    def close(self) -> None:
        self.closed = True


def redirect(location: str, status: int = 302) -> FakeResponse:
    return FakeResponse(status_code=status, headers=CaseInsensitiveDict({"Location": location}))


@pytest.fixture(name="fake_session")
def fake_session_fixture():
    """Factory: fake_session({url: FakeResponse(...)})."""
    return FakeSession


@pytest.fixture(name="fake_response")
def fake_response_fixture():
    return FakeResponse


@pytest.fixture(name="redirect")
def redirect_fixture():
    return redirect
