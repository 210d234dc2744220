"""Message exchange services built on the core components."""

from mq_tool.services.exchange import ReceiveSession, open_receive_session, send_message
from mq_tool.services.follow import FollowLoop, FollowState

__all__ = [
    "FollowLoop",
    "FollowState",
    "ReceiveSession",
    "open_receive_session",
    "send_message",
]
