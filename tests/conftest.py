"""Shared fixtures: an in-memory Supabase table client and a fake HTTP session."""

import datetime
import threading
import uuid

import jwt
import pytest
from postgrest.exceptions import APIError
from supabase import AuthError

from bible_reader.services.annotations import AnnotationStore
from bible_reader.services.catalog import BookCatalog
from bible_reader.services.reading_plans import ReadingPlanStore
from bible_reader.services.sources import BooksApiSource, VerseApiSource
from bible_reader.utils.auth import AuthContext

USER_ID = "5b0c2d4e-8f61-4a3b-9c7d-1e2f3a4b5c6d"
OTHER_USER_ID = "9a8b7c6d-5e4f-4321-8765-0fedcba98765"
JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
VERSE_API = "https://verses.test"
BOOKS_API = "https://books.test"
PLAN_ID = "3f1a7c52-8e0b-4d6a-b1c9-2e4f6a8d0b13"

UNIQUE_KEYS = {
    "bookmarks": ("user_id", "verse_id"),
    "highlights": ("user_id", "verse_id"),
    "reading_progress": ("user_id", "plan_id"),
}


# --- Supabase fake ---


class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Subset of the postgrest query builder the stores use."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = None
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.order_by = None
        self.limit_to = None

    def select(self, columns="*", **kwargs):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, row):
        self.op = "insert"
        self.payload = dict(row)
        return self

    def upsert(self, row, on_conflict=""):
        self.op = "upsert"
        self.payload = dict(row)
        self.on_conflict = tuple(c.strip() for c in on_conflict.split(",") if c.strip())
        return self

    def update(self, values):
        self.op = "update"
        self.payload = dict(values)
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_to = count
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def _project(self, row):
        if not self.columns or self.columns.strip() == "*":
            return dict(row)
        names = [c.strip() for c in self.columns.split(",")]
        return {name: row.get(name) for name in names}

    def execute(self):
        return self.db.execute(self)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self._clock = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
        self._lock = threading.Lock()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def fail(self, table, op, exc=None, times=1):
        """Make the next ``times`` calls of ``op`` on ``table`` raise ``exc``."""
        if exc is None:
            exc = APIError({"message": "backend down", "code": "500", "hint": None, "details": None})
        self.failures[(table, op)] = [exc, times]

    def _tick(self):
        self._clock += datetime.timedelta(seconds=1)
        return self._clock.isoformat()

    def _unique_violation(self, table, row, ignore=None):
        keys = UNIQUE_KEYS.get(table)
        if not keys:
            return None
        for existing in self.rows(table):
            if existing is ignore:
                continue
            if all(existing.get(k) == row.get(k) for k in keys):
                return existing
        return None

    def _new_row(self, table, payload):
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._tick())
        return row

    def execute(self, query):
        with self._lock:
            self.calls.append((query.table, query.op))
            failure = self.failures.get((query.table, query.op))
            if failure is not None:
                exc, times = failure
                if times <= 1:
                    del self.failures[(query.table, query.op)]
                else:
                    failure[1] = times - 1
                raise exc

            rows = self.rows(query.table)
            if query.op == "select":
                found = [r for r in rows if query._matches(r)]
                if query.order_by:
                    column, desc = query.order_by
                    found.sort(key=lambda r: r.get(column) or "", reverse=desc)
                if query.limit_to is not None:
                    found = found[: query.limit_to]
                return FakeResult([query._project(r) for r in found])

            if query.op == "insert":
                if self._unique_violation(query.table, query.payload):
                    raise APIError({
                        "message": "duplicate key value violates unique constraint",
                        "code": "23505",
                        "hint": None,
                        "details": None,
                    })
                row = self._new_row(query.table, query.payload)
                rows.append(row)
                return FakeResult([dict(row)])

            if query.op == "upsert":
                existing = None
                for candidate in rows:
                    if all(candidate.get(k) == query.payload.get(k) for k in query.on_conflict):
                        existing = candidate
                        break
                if existing is not None:
                    existing.update(query.payload)
                    return FakeResult([dict(existing)])
                row = self._new_row(query.table, query.payload)
                rows.append(row)
                return FakeResult([dict(row)])

            if query.op == "update":
                changed = [r for r in rows if query._matches(r)]
                for row in changed:
                    row.update(query.payload)
                return FakeResult([dict(r) for r in changed])

            if query.op == "delete":
                removed = [r for r in rows if query._matches(r)]
                self.tables[query.table] = [r for r in rows if not query._matches(r)]
                return FakeResult([dict(r) for r in removed])

            raise AssertionError(f"unsupported op {query.op}")


class LoginRejected(AuthError):
    """AuthError whose constructor does not depend on the auth client version."""

    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


class FakeUser:
    def __init__(self, user_id, email):
        self.id = user_id
        self.email = email


class FakeSession:
    def __init__(self, access_token, refresh_token):
        self.access_token = access_token
        self.refresh_token = refresh_token


class FakeAuthResponse:
    def __init__(self, user, session):
        self.user = user
        self.session = session


class FakeAdmin:
    def __init__(self):
        self.signed_out = []

    def sign_out(self, jwt_token, scope="global"):
        self.signed_out.append(jwt_token)


class FakeAuth:
    def __init__(self):
        self.admin = FakeAdmin()
        self.passwords = {}

    def sign_in_with_password(self, credentials):
        email = credentials["email"]
        if self.passwords.get(email) != credentials["password"]:
            raise LoginRejected("Invalid login credentials")
        token = make_token(USER_ID, email=email)
        return FakeAuthResponse(FakeUser(USER_ID, email), FakeSession(token, "refresh-token"))


# --- HTTP fake ---


class FakeHttpResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeHttpSession:
    """Stands in for ``requests.Session``; answers from a URL table."""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self._lock = threading.Lock()

    def add(self, url, payload=None, status=200, handler=None):
        self.routes[url] = (status, payload, handler)

    def get(self, url, params=None, timeout=None):
        with self._lock:
            self.calls.append((url, dict(params or {})))
        if url not in self.routes:
            return FakeHttpResponse(404, {"error": "not found"})
        status, payload, handler = self.routes[url]
        if handler is not None:
            result = handler(url, params)
            if isinstance(result, Exception):
                raise result
            if result is not None:
                status, payload = result
        return FakeHttpResponse(status, payload)

    def urls(self):
        return [url for url, _ in self.calls]


def passage_payload(book, chapter, count):
    verses = [
        {"book_id": "X", "book_name": book, "chapter": chapter, "verse": n,
         "text": f"{book} {chapter}:{n} text\n"}
        for n in range(1, count + 1)
    ]
    return {"reference": f"{book} {chapter}", "verses": verses, "text": "", "translation_id": "kjv"}


def verse_api_url(book, chapter):
    return f"{VERSE_API}/{book.replace(' ', '+')}+{chapter}"


def make_token(user_id=USER_ID, email="reader@example.com", expires_in=3600):
    now = datetime.datetime.now(datetime.timezone.utc)
    return jwt.encode(
        {
            "sub": user_id,
            "aud": "authenticated",
            "email": email,
            "exp": now + datetime.timedelta(seconds=expires_in),
        },
        JWT_SECRET,
        algorithm="HS256",
    )


# --- fixtures ---


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def http():
    return FakeHttpSession()


@pytest.fixture
def auth():
    return AuthContext(user_id=USER_ID, access_token="token")


@pytest.fixture
def store(supabase, auth):
    return AnnotationStore(supabase, auth)


@pytest.fixture
def anonymous_store(supabase):
    return AnnotationStore(supabase, None)


@pytest.fixture
def plan_store(supabase, auth):
    return ReadingPlanStore(supabase, auth)


@pytest.fixture
def verse_source(http):
    return VerseApiSource(VERSE_API, session=http, timeout=5)


@pytest.fixture
def books_source(http):
    return BooksApiSource(BOOKS_API, session=http, timeout=5)


@pytest.fixture
def catalog():
    catalog = BookCatalog()
    catalog.list_books()
    return catalog


@pytest.fixture
def app(supabase, http):
    from bible_reader.app import create_app

    app = create_app(
        {
            "TESTING": True,
            "SUPABASE_JWT_SECRET": JWT_SECRET,
            "VERSE_API_URL": VERSE_API,
            "BOOKS_API_URL": None,
            "CHAPTER_SOURCE": "verse-api",
            "DEFAULT_TRANSLATION": "kjv",
        },
        supabase_client=supabase,
        http_session=http,
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}
