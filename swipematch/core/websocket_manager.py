"""
WebSocket connection manager for real-time match and message delivery.

Connections are organised into broadcast groups:

- ``user:{user_id}``  joined automatically when a connection authenticates;
  carries match notifications and other per-user events.
- ``match:{match_id}`` joined explicitly by a client after the server has
  checked that the user is one of the two match parties; carries chat
  messages and typing indicators.

Delivery is best-effort and at-most-once: a failed send drops the connection
and nothing is queued for later.
"""

from typing import Dict, Set, Optional
from fastapi import WebSocket
from uuid import UUID
import logging
from datetime import datetime

logger = logging.getLogger(__name__)


def user_group(user_id: UUID) -> str:
    return f"user:{user_id}"


def match_group(match_id: UUID) -> str:
    return f"match:{match_id}"


class ConnectionManager:
    """
    Tracks live WebSocket connections and the groups each one belongs to.

    A user may hold several connections (tabs, devices); every one of them is
    a member of that user's ``user:`` group.
    """

    def __init__(self):
        # group key → Set[WebSocket]
        self.groups: Dict[str, Set[WebSocket]] = {}

        # WebSocket → user_id (for cleanup)
        self.connection_owners: Dict[WebSocket, UUID] = {}

        # WebSocket → group keys it has joined
        self.connection_groups: Dict[WebSocket, Set[str]] = {}

        # WebSocket → last_pong_time (for health checks)
        self.last_pong: Dict[WebSocket, datetime] = {}

    async def connect(self, websocket: WebSocket, user_id: UUID):
        """
        Register an authenticated connection and join its per-user group.

        NOTE: websocket.accept() must be called by the endpoint before this.
        """
        self.connection_owners[websocket] = user_id
        self.connection_groups[websocket] = set()
        self.last_pong[websocket] = datetime.utcnow()
        self.join_group(websocket, user_group(user_id))

        logger.info(
            "[ConnectionManager] Registered connection for user %s (%d open)",
            user_id, len(self.groups.get(user_group(user_id), ())),
        )

    def disconnect(self, websocket: WebSocket):
        """Remove a connection from every group it joined."""
        if websocket not in self.connection_owners:
            logger.debug("[ConnectionManager] Disconnect called for untracked websocket")
            return

        user_id = self.connection_owners.pop(websocket)
        for group_key in self.connection_groups.pop(websocket, set()):
            members = self.groups.get(group_key)
            if members is None:
                continue
            members.discard(websocket)
            if not members:
                del self.groups[group_key]
        self.last_pong.pop(websocket, None)

        logger.info(
            "[ConnectionManager] Disconnected user %s (%d groups active)",
            user_id, len(self.groups),
        )

    def join_group(self, websocket: WebSocket, group_key: str):
        """Add a tracked connection to a broadcast group."""
        if websocket not in self.connection_owners:
            logger.warning("[ConnectionManager] join_group on untracked websocket: %s", group_key)
            return
        self.groups.setdefault(group_key, set()).add(websocket)
        self.connection_groups[websocket].add(group_key)
        logger.debug("[ConnectionManager] Joined %s", group_key)

    def leave_group(self, websocket: WebSocket, group_key: str):
        members = self.groups.get(group_key)
        if members is not None:
            members.discard(websocket)
            if not members:
                del self.groups[group_key]
        if websocket in self.connection_groups:
            self.connection_groups[websocket].discard(group_key)
        logger.debug("[ConnectionManager] Left %s", group_key)

    def close_group(self, group_key: str) -> int:
        """
        Drop a group and remove every member from it.

        Connections stay open and keep their other groups.

        Returns:
            Number of connections evicted
        """
        members = self.groups.pop(group_key, set())
        for websocket in members:
            if websocket in self.connection_groups:
                self.connection_groups[websocket].discard(group_key)
        if members:
            logger.info("[ConnectionManager] Closed %s (%d evicted)", group_key, len(members))
        return len(members)

    def is_member(self, websocket: WebSocket, group_key: str) -> bool:
        return websocket in self.groups.get(group_key, ())

    async def broadcast(
        self,
        group_key: str,
        message: dict,
        exclude: Optional[WebSocket] = None
    ) -> int:
        """
        Send a message to every connection in a group.

        Args:
            group_key: e.g. ``user:<id>`` or ``match:<id>``
            message: Dictionary to send as JSON
            exclude: Optional connection to skip (typing indicators)

        Returns:
            Number of connections the message was delivered to
        """
        members = self.groups.get(group_key)
        if not members:
            logger.debug(
                "[ConnectionManager] No live members in %s, %s not delivered",
                group_key, message.get("type"),
            )
            return 0

        delivered = 0
        disconnected = []
        for websocket in members.copy():
            if websocket is exclude:
                continue
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.error(f"[ConnectionManager] Error sending to {group_key}: {e}")
                disconnected.append(websocket)

        # Clean up failed connections
        for ws in disconnected:
            self.disconnect(ws)

        return delivered

    async def send_to_user(self, user_id: UUID, message: dict) -> int:
        """Send a message to all live connections of one user."""
        return await self.broadcast(user_group(user_id), message)

    def update_pong(self, websocket: WebSocket):
        """Update last pong time for connection health tracking."""
        self.last_pong[websocket] = datetime.utcnow()

    def get_connection_count(self) -> dict:
        """Get statistics about active connections."""
        return {
            "total_connections": len(self.connection_owners),
            "unique_users": len(set(self.connection_owners.values())),
            "match_groups": sum(1 for key in self.groups if key.startswith("match:")),
        }


# Global singleton instance
connection_manager = ConnectionManager()
