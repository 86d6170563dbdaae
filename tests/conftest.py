"""Shared test fixtures for the Ententi reading API tests."""

from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from services.api.app import extractors


SAMPLE_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>BBC News</title>
    <link>https://www.bbc.co.uk/news</link>
    <description>BBC News - News Front Page</description>
    <item>
      <title>Older Article</title>
      <link>https://www.bbc.co.uk/news/articles/older</link>
      <guid isPermaLink="false">older-guid</guid>
      <description><![CDATA[<p>Description of the <b>older</b> article</p>]]></description>
      <pubDate>Thu, 13 Feb 2026 09:00:00 GMT</pubDate>
      <media:thumbnail width="240" height="135" url="https://ichef.bbci.co.uk/older.jpg"/>
    </item>
    <item>
      <title>Newest Article</title>
      <link>https://www.bbc.co.uk/news/articles/newest</link>
      <guid isPermaLink="false">newest-guid</guid>
      <description>Description of the newest article</description>
      <pubDate>Thu, 13 Feb 2026 10:00:00 GMT</pubDate>
      <dc:creator>Jane Reporter</dc:creator>
      <category>World</category>
      <category>Europe</category>
      <category>World</category>
      <media:thumbnail width="240" height="135" url="https://ichef.bbci.co.uk/newest.jpg"/>
    </item>
    <item>
      <title>No Guid Article</title>
      <link>https://www.bbc.co.uk/news/articles/no-guid</link>
      <description>Guid falls back to the link</description>
      <pubDate>Thu, 13 Feb 2026 08:00:00 GMT</pubDate>
    </item>
    <item>
      <link>https://www.bbc.co.uk/news/articles/untitled</link>
      <guid>untitled-guid</guid>
      <pubDate>Thu, 13 Feb 2026 11:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_UNDATED_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Undated</title>
    <item>
      <title>First</title>
      <link>https://example.com/1</link>
      <pubDate>Thu, 13 Feb 2026 08:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second</title>
      <link>https://example.com/2</link>
    </item>
    <item>
      <title>Third</title>
      <link>https://example.com/3</link>
      <pubDate>Thu, 13 Feb 2026 12:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:media="http://search.yahoo.com/mrss/">
  <title>Test Atom Feed</title>
  <subtitle>A test Atom feed</subtitle>
  <link href="https://example.com"/>
  <entry>
    <title>Atom Entry 1</title>
    <link rel="enclosure" href="https://example.com/audio.mp3"/>
    <link rel="alternate" href="https://example.com/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <author><name>Ada Writer</name></author>
    <category term="science"/>
    <summary>Summary of entry 1</summary>
    <media:content url="https://example.com/entry-1.jpg" medium="image"/>
    <updated>2026-02-13T10:00:00Z</updated>
  </entry>
</feed>"""

SAMPLE_MALFORMED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Malformed Feed</title>
    <item>
      <title>Bad Item</title>
"""

SAMPLE_NOT_A_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed</body>
</html>"""

COLOMBIA_ONE_HTML = """<!doctype html>
<html><body>
<div class="td_block_wrap">
  <div class="td_module_wrap td_module_flex">
    <div class="td-module-thumb">
      <a href="https://colombiaone.com/2026/02/10/cumbia-festival/" class="td-image-wrap">
        <span class="entry-thumb" data-img-url="/wp-content/uploads/2026/02/cumbia.jpg"></span>
      </a>
    </div>
    <h3 class="entry-title td-module-title">
      <a href="https://colombiaone.com/2026/02/10/cumbia-festival/">Cumbia festival returns to Barranquilla</a>
    </h3>
    <div class="td-post-date"><time class="entry-date" datetime="2026-02-10T14:30:00+00:00">February 10, 2026</time></div>
    <div class="td-excerpt">The festival brings together musicians from the whole Caribbean coast.</div>
  </div>
  <div class="td_module_wrap">
    <div class="td-module-thumb"><img data-src="//colombiaone.com/wp-content/uploads/2026/02/coffee.jpg"/></div>
    <h3 class="entry-title"><a href="/2026/02/09/coffee-harvest/">Record coffee harvest in Huila</a></h3>
    <div class="td-post-date">February 9, 2026</div>
    <p>Growers report the best season in a decade.</p>
  </div>
  <div class="td_module_wrap">
    <h3 class="entry-title"><a href="https://colombiaone.com/2026/02/10/cumbia-festival/">Cumbia festival returns to Barranquilla</a></h3>
  </div>
  <div class="td_module_wrap">
    <h3 class="entry-title"><a href="https://elsewhere.example.com/story/">Off-site story</a></h3>
  </div>
  <div class="td_module_wrap">
    <a href="https://colombiaone.com/2026/02/08/no-title/">Link without a title block</a>
  </div>
</div>
</body></html>"""

COLOMBIA_ONE_FALLBACK_HTML = """<!doctype html>
<html><body>
<div class="tdb_module_loop">
  <article>
    <div style="background-image: url('https://colombiaone.com/wp-content/uploads/2026/02/salsa.jpg')"></div>
    <h2 class="tdb-title-text"><a href="https://colombiaone.com/2026/02/07/salsa-cali/">Salsa schools of Cali</a></h2>
    <time datetime="2026-02-07T09:00:00+00:00">Feb 7</time>
    <p>Cali's dance academies draw students from abroad.</p>
  </article>
</div>
<h2>Newsletter</h2>
</body></html>"""


STATIC_ARTICLE_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Storm hits the Caribbean coast</title>
  <meta property="og:title" content="Storm hits the Caribbean coast">
  <meta property="og:site_name" content="Example News">
  <meta property="og:image" content="https://example.com/images/storm.jpg">
  <meta name="author" content="Jane Reporter">
  <meta name="description" content="Heavy rain and strong winds reached the coast overnight.">
</head>
<body>
  <nav><a href="/">Home</a> <a href="/world">World</a></nav>
  <article>
    <h1>Storm hits the Caribbean coast</h1>
    <p class="byline">By Jane Reporter</p>
    <p>Heavy rain and strong winds reached the Caribbean coast of Colombia overnight, flooding streets in several towns and cutting power to thousands of homes. Local officials said that emergency teams were working through the night to clear the roads.</p>
    <p>The storm had been expected for several days, and many families had already moved to shelters set up in schools and community centres. Fishermen kept their boats in the harbour and most shops in the old town stayed closed.</p>
    <p>Forecasters said that the worst of the weather would pass by the afternoon, but they warned that rivers in the mountains could continue to rise for another day. People living near the water were asked to stay alert and to follow the advice of the authorities.</p>
    <p>Schools in the region will remain closed until the end of the week while engineers check that the buildings are safe. The national government has promised to send more help to the towns that were hit the hardest.</p>
  </article>
  <footer>Copyright Example News</footer>
</body>
</html>"""

class MockHttp:
    """Routes outbound httpx traffic to canned responses keyed by URL.

    Unregistered URLs fail like an unreachable host.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Tuple[int, bytes, Dict[str, str]]] = {}
        self.calls: List[httpx.Request] = []

    def add(self, url: str, body: Any = b"", status: int = 200, content_type: str = "application/xml") -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[url] = (status, body, {"content-type": content_type})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            raise httpx.ConnectError("unreachable host", request=request)
        status, body, headers = route
        return httpx.Response(status, content=body, headers=headers, request=request)

    def client(self, headers: Optional[Dict[str, str]] = None) -> httpx.Client:
        return httpx.Client(
            transport=httpx.MockTransport(self.handler),
            headers=headers or {},
            follow_redirects=True,
        )


@pytest.fixture
def mock_http(monkeypatch):
    """Replace the outbound HTTP client with a MockTransport-backed one."""
    mock = MockHttp()
    monkeypatch.setattr(extractors, "_client", mock.client)
    return mock


@pytest.fixture
def client(mock_http):
    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Supabase fakes
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, data=None, user=None, session=None):
        self.data = data
        self.user = user
        self.session = session


class FakeUser:
    def __init__(self, id: str, email: str = "reader@example.com"):
        self.id = id
        self.email = email

    def model_dump(self, mode: str = "python") -> Dict[str, Any]:
        return {"id": self.id, "email": self.email}


class FakeAdmin:
    def __init__(self, auth: "FakeAuth"):
        self._auth = auth

    def sign_out(self, jwt: str) -> None:
        self._auth.calls.append(("admin.sign_out", jwt))


class FakeAuth:
    def __init__(self):
        self.calls: List[Tuple[str, Any]] = []
        self.tokens: Dict[str, str] = {"good-token": "user-1"}
        self.fail_with: Optional[Exception] = None
        self.admin = FakeAdmin(self)

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def sign_in_with_password(self, creds):
        self.calls.append(("sign_in", creds))
        self._maybe_fail()
        return FakeResponse(user=FakeUser("user-1", creds["email"]), session=None)

    def sign_up(self, creds):
        self.calls.append(("sign_up", creds))
        self._maybe_fail()
        return FakeResponse(user=FakeUser("user-2", creds["email"]))

    def sign_out(self):
        self.calls.append(("sign_out", None))
        self._maybe_fail()

    def reset_password_for_email(self, email, options=None):
        self.calls.append(("reset", email))
        self._maybe_fail()

    def get_user(self, jwt):
        self.calls.append(("get_user", jwt))
        user_id = self.tokens.get(jwt)
        if user_id is None:
            raise RuntimeError("invalid JWT")
        return FakeResponse(user=FakeUser(user_id))


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.filters: List[Tuple[str, Any]] = []
        self.op = "select"
        self.payload: Any = None

    def select(self, *_args, **_kwargs):
        self.op = "select"
        return self

    def insert(self, row):
        self.op = "insert"
        self.payload = row
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, col, val):
        self.filters.append((col, val))
        return self

    def order(self, col, desc=False):
        self.order_by = (col, desc)
        return self

    def _match(self, row) -> bool:
        return all(row.get(c) == v for c, v in self.filters)

    def execute(self):
        rows = self.db.rows.setdefault(self.table, [])
        if self.op == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(len(rows) + 1))
            row.setdefault("created_at", f"2026-02-13T10:00:0{len(rows)}Z")
            rows.append(row)
            return FakeResponse(data=[row])
        if self.op == "delete":
            gone = [r for r in rows if self._match(r)]
            self.db.rows[self.table] = [r for r in rows if not self._match(r)]
            return FakeResponse(data=gone)
        found = [r for r in rows if self._match(r)]
        if getattr(self, "order_by", None):
            col, desc = self.order_by
            found.sort(key=lambda r: r.get(col) or "", reverse=desc)
        return FakeResponse(data=found)


class FakePostgrest:
    def __init__(self):
        self.token: Optional[str] = None

    def auth(self, token: str) -> None:
        self.token = token


class FakeSupabase:
    def __init__(self):
        self.auth = FakeAuth()
        self.postgrest = FakePostgrest()
        self.rows: Dict[str, List[Dict[str, Any]]] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase(monkeypatch):
    from services.api.app import auth, saved

    fake = FakeSupabase()

    def get_fake(access_token=None):
        if access_token:
            fake.postgrest.auth(access_token)
        return fake

    monkeypatch.setattr(auth, "get_supabase", get_fake)
    monkeypatch.setattr(saved, "get_supabase", get_fake)
    return fake
