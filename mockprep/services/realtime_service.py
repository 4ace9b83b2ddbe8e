"""
Realtime voice rooms for interviews.

RealtimeSessionService is the port the interview lifecycle depends on.
LiveKitSessionService uses the LiveKit server SDK: AccessToken for join tokens
and the RoomService client for room create, delete and lookup.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Optional

from livekit import api

from mockprep.core.config import (
    LIVEKIT_URL,
    LIVEKIT_API_KEY,
    LIVEKIT_API_SECRET,
    LIVEKIT_TOKEN_TTL_SECONDS,
    LIVEKIT_ROOM_EMPTY_TIMEOUT,
    LIVEKIT_ROOM_MAX_PARTICIPANTS,
)
from mockprep.core.errors import SessionProviderError

logger = logging.getLogger(__name__)

ROOM_INFO_FIELDS = ("sid", "name", "num_participants", "max_participants", "empty_timeout", "creation_time")


def room_name_for(interview_id: str) -> str:
    return f"interview-{interview_id}"


class RealtimeSessionService(ABC):
    """Allocates rooms, issues join tokens and tears rooms down."""

    ws_url: str = LIVEKIT_URL

    @abstractmethod
    def allocate_room(self, interview_id: str) -> str:
        """Create the room for an interview and return its name. Raises SessionProviderError."""

    @abstractmethod
    def issue_token(self, room_name: str, participant_name: str, user_id: str) -> str:
        """Return a signed join token. Raises SessionProviderError."""

    @abstractmethod
    def teardown_room(self, room_name: str) -> None:
        """Delete the room. Best-effort: never raises."""

    def get_room_info(self, room_name: str) -> Optional[Dict[str, Any]]:
        return None

    def close(self) -> None:
        pass


class LiveKitSessionService(RealtimeSessionService):
    """
    LiveKit-backed implementation.

    The SDK's room service is async. Each call runs to completion on its own
    event loop, so these methods must be called from sync code (FastAPI runs
    the sync routes in a worker thread).
    """

    def __init__(
        self,
        url: str = LIVEKIT_URL,
        api_key: str = LIVEKIT_API_KEY,
        api_secret: str = LIVEKIT_API_SECRET,
        token_ttl_seconds: int = LIVEKIT_TOKEN_TTL_SECONDS,
        api_factory: Optional[Callable[[], api.LiveKitAPI]] = None,
    ):
        self.ws_url = url
        self.api_key = api_key
        self.api_secret = api_secret
        self.token_ttl_seconds = token_ttl_seconds
        self._api_factory = api_factory or self._build_api
        if not api_key or not api_secret:
            logger.warning("LIVEKIT_API_KEY / LIVEKIT_API_SECRET not configured - voice rooms will fail")

    @staticmethod
    def _http_base_url(url: str) -> str:
        if url.startswith("wss://"):
            return "https://" + url[len("wss://"):]
        if url.startswith("ws://"):
            return "http://" + url[len("ws://"):]
        return url

    def _build_api(self) -> api.LiveKitAPI:
        return api.LiveKitAPI(self._http_base_url(self.ws_url), self.api_key, self.api_secret)

    def _room_call(self, call: Callable[[Any], Awaitable[Any]]) -> Any:
        async def run():
            lkapi = self._api_factory()
            try:
                return await call(lkapi.room)
            finally:
                await lkapi.aclose()

        return asyncio.run(run())

    def allocate_room(self, interview_id: str) -> str:
        room_name = room_name_for(interview_id)
        request = api.CreateRoomRequest(
            name=room_name,
            empty_timeout=LIVEKIT_ROOM_EMPTY_TIMEOUT,
            max_participants=LIVEKIT_ROOM_MAX_PARTICIPANTS,
        )
        try:
            self._room_call(lambda room: room.create_room(request))
        except Exception as e:
            logger.warning(f"Failed to create interview room {room_name}: {e}")
            raise SessionProviderError(f"Failed to create interview room {room_name}") from e

        logger.info(f"Interview room created: {room_name}")
        return room_name

    def issue_token(self, room_name: str, participant_name: str, user_id: str) -> str:
        if not self.api_key or not self.api_secret:
            raise SessionProviderError("LiveKit credentials not configured")

        grants = api.VideoGrants(
            room_join=True,
            room=room_name,
            can_publish=True,
            can_subscribe=True,
            can_publish_data=True,
        )
        return (
            api.AccessToken(self.api_key, self.api_secret)
            .with_identity(user_id)
            .with_name(participant_name)
            .with_grants(grants)
            .with_ttl(timedelta(seconds=self.token_ttl_seconds))
            .to_jwt()
        )

    def teardown_room(self, room_name: str) -> None:
        try:
            self._room_call(lambda room: room.delete_room(api.DeleteRoomRequest(room=room_name)))
            logger.info(f"Interview room deleted: {room_name}")
        except Exception as e:
            logger.warning(f"Error ending interview room {room_name}: {e}", exc_info=True)

    def get_room_info(self, room_name: str) -> Optional[Dict[str, Any]]:
        try:
            response = self._room_call(lambda room: room.list_rooms(api.ListRoomsRequest(names=[room_name])))
        except Exception as e:
            logger.warning(f"Error getting room info for {room_name}: {e}")
            return None
        if not response.rooms:
            return None
        room = response.rooms[0]
        return {field: getattr(room, field) for field in ROOM_INFO_FIELDS}
