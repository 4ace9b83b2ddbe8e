"""
Tests for the LiveKit session service with a fake room-service client.
"""
from types import SimpleNamespace

import pytest
from jose import jwt

from mockprep.core.errors import SessionProviderError
from mockprep.services.realtime_service import LiveKitSessionService, room_name_for

API_KEY = "devkey"
API_SECRET = "devsecret-that-is-long-enough"


class FakeRoomService:
    def __init__(self, rooms=None, error=None):
        self.rooms = rooms or []
        self.error = error
        self.requests = []

    async def _handle(self, method, request, result=None):
        self.requests.append((method, request))
        if self.error:
            raise self.error
        return result

    async def create_room(self, request):
        return await self._handle("create_room", request, SimpleNamespace(name=request.name))

    async def delete_room(self, request):
        return await self._handle("delete_room", request)

    async def list_rooms(self, request):
        return await self._handle("list_rooms", request, SimpleNamespace(rooms=self.rooms))


class FakeLiveKitAPI:
    def __init__(self, room):
        self.room = room
        self.closed = False

    async def aclose(self):
        self.closed = True


def _service(room=None, api_key=API_KEY, api_secret=API_SECRET):
    room = room or FakeRoomService()
    clients = []

    def factory():
        clients.append(FakeLiveKitAPI(room))
        return clients[-1]

    service = LiveKitSessionService(
        url="wss://livekit.example",
        api_key=api_key,
        api_secret=api_secret,
        token_ttl_seconds=600,
        api_factory=factory,
    )
    return service, room, clients


def test_room_name_for():
    assert room_name_for("abc") == "interview-abc"


def test_http_base_url_from_websocket_url():
    assert LiveKitSessionService._http_base_url("wss://lk.example") == "https://lk.example"
    assert LiveKitSessionService._http_base_url("ws://localhost:7880") == "http://localhost:7880"


def test_allocate_room_creates_room():
    service, room, clients = _service()

    assert service.allocate_room("42") == "interview-42"

    [(method, request)] = room.requests
    assert method == "create_room"
    assert request.name == "interview-42"
    assert request.max_participants == 2
    assert request.empty_timeout == 300
    assert all(client.closed for client in clients)


def test_allocate_room_failure_raises():
    service, _, clients = _service(FakeRoomService(error=RuntimeError("twirp error: unavailable")))

    with pytest.raises(SessionProviderError):
        service.allocate_room("42")
    assert clients[0].closed


def test_issue_token_grants_room_join():
    service, room, _ = _service()

    token = service.issue_token("interview-42", "Ada", "user-1")

    claims = jwt.decode(token, API_SECRET, algorithms=["HS256"])
    assert claims["iss"] == API_KEY
    assert claims["sub"] == "user-1"
    assert claims["name"] == "Ada"
    assert claims["exp"] - claims["nbf"] == pytest.approx(600, abs=1)
    video = claims["video"]
    assert video["roomJoin"] is True
    assert video["room"] == "interview-42"
    assert video["canPublish"] is True
    assert video["canSubscribe"] is True
    assert video["canPublishData"] is True
    assert room.requests == []


def test_issue_token_without_credentials():
    service, _, _ = _service(api_key="", api_secret="")

    with pytest.raises(SessionProviderError):
        service.issue_token("interview-42", "Ada", "user-1")


def test_teardown_room_deletes_room():
    service, room, _ = _service()

    service.teardown_room("interview-42")

    [(method, request)] = room.requests
    assert method == "delete_room"
    assert request.room == "interview-42"


def test_teardown_room_never_raises():
    service, _, _ = _service(FakeRoomService(error=ConnectionError("connection refused")))

    service.teardown_room("interview-42")


def test_get_room_info():
    stored = SimpleNamespace(
        sid="RM_1", name="interview-42", num_participants=1,
        max_participants=2, empty_timeout=300, creation_time=1700000000,
    )
    service, room, _ = _service(FakeRoomService(rooms=[stored]))

    info = service.get_room_info("interview-42")

    assert info == {
        "sid": "RM_1",
        "name": "interview-42",
        "num_participants": 1,
        "max_participants": 2,
        "empty_timeout": 300,
        "creation_time": 1700000000,
    }
    assert list(room.requests[0][1].names) == ["interview-42"]


def test_get_room_info_missing_or_failing():
    service, _, _ = _service(FakeRoomService(rooms=[]))
    assert service.get_room_info("interview-42") is None

    service, _, _ = _service(FakeRoomService(error=RuntimeError("twirp error: internal")))
    assert service.get_room_info("interview-42") is None
