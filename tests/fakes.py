"""
In-memory stand-in for the parts of the Supabase async client the service
uses: the postgrest query builder, auth, and realtime channels.

One FakeBackend holds the shared state (tables, accounts, open channels);
every FakeSupabase handed out by it is a separate "client" with its own
auth session, like the per-request clients the service creates.
"""
import itertools
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


class FakeAPIError(Exception):
    """Mimics postgrest/gotrue errors: carries the backend's `message`."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]


@dataclass
class FakeUser:
    id: str
    email: str
    user_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FakeSession:
    access_token: str
    refresh_token: str
    user: FakeUser
    expires_in: int = 3600


@dataclass
class FakeAuthResponse:
    user: Optional[FakeUser] = None
    session: Optional[FakeSession] = None


@dataclass
class FakeOAuthResponse:
    provider: str
    url: str


JOIN_TOKEN = "users!orders_user_id_fkey(name)"


class FakeQuery:
    def __init__(self, backend: "FakeBackend", table: str):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.fields = "*"
        self.filters: List[tuple] = []
        self.order_by: Optional[tuple] = None
        self.limit_n: Optional[int] = None
        self.payload: Any = None
        self.on_conflict: Optional[str] = None

    def select(self, fields: str = "*"):
        self.op, self.fields = "select", fields
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def upsert(self, data, on_conflict: Optional[str] = None):
        self.op, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, n: int):
        self.limit_n = n
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self) -> FakeResponse:
        backend = self.backend
        backend.calls.append((self.table, self.op))
        failure = backend.failures.get((self.table, self.op))
        if failure is None and self.op == "select" and JOIN_TOKEN in self.fields:
            failure = backend.failures.get((self.table, "join"))
        if failure is not None:
            raise FakeAPIError(failure)

        rows = backend.tables[self.table]
        if self.op == "select":
            return FakeResponse(self._select(rows))
        if self.op == "insert":
            row = backend.new_row(self.payload)
            rows.append(row)
            return FakeResponse([dict(row)])
        if self.op == "upsert":
            key = self.on_conflict or "id"
            existing = next((r for r in rows if r.get(key) == self.payload.get(key)), None)
            if existing is not None:
                existing.update(self.payload)
                return FakeResponse([dict(existing)])
            row = backend.new_row(self.payload)
            rows.append(row)
            return FakeResponse([dict(row)])
        if self.op == "update":
            matched = [r for r in rows if self._matches(r)]
            for row in matched:
                row.update(self.payload)
            return FakeResponse([dict(r) for r in matched])
        if self.op == "delete":
            matched = [r for r in rows if self._matches(r)]
            backend.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResponse([dict(r) for r in matched])
        raise AssertionError(f"unsupported op {self.op}")

    def _select(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        selected = [dict(r) for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            selected.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.limit_n is not None:
            selected = selected[: self.limit_n]

        tokens = [t.strip() for t in self.fields.split(",")]
        result = []
        for row in selected:
            if "*" in tokens:
                out = dict(row)
            else:
                out = {t: row.get(t) for t in tokens if t != JOIN_TOKEN}
            if JOIN_TOKEN in tokens:
                profile = self.backend.find("users", id=row.get("user_id"))
                out["users"] = {"name": profile["name"]} if profile else None
            result.append(out)
        return result


class FakeSubscription:
    def __init__(self, auth: "FakeAuth", callback: Callable):
        self.auth = auth
        self.callback = callback

    def unsubscribe(self):
        if self in self.auth.listeners:
            self.auth.listeners.remove(self)


class FakeHTTPSession:
    """Stands in for the httpx sessions behind postgrest and auth."""

    def __init__(self):
        self.closed = False

    async def aclose(self):
        self.closed = True


class FakeAuth:
    def __init__(self, backend: "FakeBackend"):
        self.backend = backend
        self.session: Optional[FakeSession] = None
        self.listeners: List[FakeSubscription] = []
        self.fail_sign_out = False
        self._http_client = FakeHTTPSession()

    def _emit(self, event: str, session: Optional[FakeSession]):
        for listener in list(self.listeners):
            listener.callback(event, session)

    async def get_session(self):
        return self.session

    async def set_session(self, access_token: str, refresh_token: str):
        session = self.backend.sessions.get(access_token)
        if session is None:
            raise FakeAPIError("Invalid JWT")
        self.session = session
        return FakeAuthResponse(session.user, session)

    async def sign_in_with_password(self, credentials: Dict[str, str]):
        account = self.backend.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        self.session = self.backend.open_session(account["user"])
        self._emit("SIGNED_IN", self.session)
        return FakeAuthResponse(self.session.user, self.session)

    async def sign_up(self, credentials: Dict[str, Any]):
        email = credentials["email"]
        if email in self.backend.accounts:
            raise FakeAPIError("User already registered")
        metadata = credentials.get("options", {}).get("data", {})
        user = self.backend.create_account(email, credentials["password"], metadata)
        return FakeAuthResponse(user, None)

    async def sign_in_with_oauth(self, credentials: Dict[str, Any]):
        redirect_to = credentials.get("options", {}).get("redirect_to", "")
        provider = credentials["provider"]
        return FakeOAuthResponse(
            provider, f"https://fake.supabase.co/auth/v1/authorize?provider={provider}&redirect_to={redirect_to}"
        )

    async def sign_out(self):
        if self.fail_sign_out:
            raise FakeAPIError("network down")
        self.session = None
        self._emit("SIGNED_OUT", None)

    def on_auth_state_change(self, callback: Callable):
        subscription = FakeSubscription(self, callback)
        self.listeners.append(subscription)
        return subscription


class FakeChannel:
    def __init__(self, client: "FakeSupabase", name: str):
        self.client = client
        self.name = name
        self.bindings: List[Dict[str, Any]] = []
        self.subscribed = False
        self.removed = False

    def on_postgres_changes(self, event: str, callback: Callable, table: str = "*", schema: str = "public",
                            filter: Optional[str] = None):
        self.bindings.append({"event": event, "table": table, "filter": filter, "callback": callback})
        return self

    async def subscribe(self, callback: Optional[Callable] = None):
        if self.name in self.client.backend.failing_channels:
            raise FakeAPIError(f"channel {self.name} refused")
        self.subscribed = True
        self.client.backend.channels.append(self)
        return self

    def deliver(self, table: str, event: str, new: Dict[str, Any], old: Dict[str, Any]):
        if not self.subscribed or self.removed:
            return
        for binding in self.bindings:
            if binding["table"] != table or binding["event"] not in ("*", event):
                continue
            if binding["filter"]:
                column, value = binding["filter"].split("=eq.", 1)
                row = new or old
                if str(row.get(column)) != value:
                    continue
            binding["callback"]({"data": {"type": event, "table": table, "record": new, "old_record": old}})


class FakeSupabase:
    def __init__(self, backend: "FakeBackend"):
        self.backend = backend
        self.auth = FakeAuth(backend)
        self._postgrest = FakeHTTPSession()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.backend, name)

    def channel(self, name: str) -> FakeChannel:
        return FakeChannel(self, name)

    async def remove_channel(self, channel: FakeChannel):
        channel.removed = True
        if channel in self.backend.channels:
            self.backend.channels.remove(channel)


class FakeBackend:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.sessions: Dict[str, FakeSession] = {}
        self.failures: Dict[tuple, str] = {}
        self.failing_channels: set = set()
        self.calls: List[tuple] = []
        self.channels: List[FakeChannel] = []
        self.clients: List["FakeSupabase"] = []
        self._ticks = itertools.count(1)

    def client(self) -> FakeSupabase:
        client = FakeSupabase(self)
        self.clients.append(client)
        return client

    def unclosed_clients(self) -> List[FakeSupabase]:
        return [c for c in self.clients if not (c._postgrest.closed and c.auth._http_client.closed)]

    def fail(self, table: str, op: str, message: str = "permission denied"):
        self.failures[(table, op)] = message

    def timestamp(self) -> str:
        tick = next(self._ticks)
        return f"2026-10-01T{tick // 3600:02d}:{tick // 60 % 60:02d}:{tick % 60:02d}+00:00"

    def new_row(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.timestamp())
        return row

    def find(self, table: str, **filters) -> Optional[Dict[str, Any]]:
        for row in self.tables[table]:
            if all(row.get(k) == v for k, v in filters.items()):
                return row
        return None

    def calls_to(self, table: str, op: str) -> int:
        return sum(1 for call in self.calls if call == (table, op))

    def create_account(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> FakeUser:
        user = FakeUser(id=str(uuid.uuid4()), email=email, user_metadata=dict(metadata or {}))
        self.accounts[email] = {"password": password, "user": user}
        return user

    def open_session(self, user: FakeUser) -> FakeSession:
        token = f"access-{uuid.uuid4().hex}"
        session = FakeSession(access_token=token, refresh_token=f"refresh-{uuid.uuid4().hex}", user=user)
        self.sessions[token] = session
        return session

    def add_user(self, email: str, name: str = "Test User", role: str = "customer",
                 password: str = "secret123", phone: Optional[str] = None,
                 business_id: Optional[str] = None) -> FakeSession:
        """Account plus profile row plus a live session; returns the session."""
        user = self.create_account(email, password, {"name": name, "phone": phone})
        self.tables["users"].append({
            "id": user.id,
            "name": name,
            "email": email,
            "phone": phone,
            "role": role,
            "business_id": business_id,
            "created_at": self.timestamp(),
        })
        return self.open_session(user)

    def add_row(self, table: str, **values) -> Dict[str, Any]:
        row = self.new_row(values)
        self.tables[table].append(row)
        return row

    def emit(self, table: str, event: str, new: Optional[Dict[str, Any]] = None,
             old: Optional[Dict[str, Any]] = None):
        """Push a postgres change to every open channel bound to `table`."""
        for channel in list(self.channels):
            channel.deliver(table, event, dict(new or {}), dict(old or {}))

    def open_channel_names(self) -> List[str]:
        return [channel.name for channel in self.channels]


def bearer(session: FakeSession) -> dict:
    return {"Authorization": f"Bearer {session.access_token}"}
