"""Database models package."""

from .base import Base
from .chat import (
    BotEndpoint,
    Channel,
    Message,
    ReactionType,
    Server,
    ServerBotEndpoint,
    User,
    UserReaction,
    UserServer,
)
from .registry import EntityDescription, RelationshipDescription, describe_entities, describe_entity

__all__ = [
    "Base",
    "User",
    "Server",
    "Channel",
    "Message",
    "UserReaction",
    "ReactionType",
    "BotEndpoint",
    "ServerBotEndpoint",
    "UserServer",
    "EntityDescription",
    "RelationshipDescription",
    "describe_entities",
    "describe_entity",
]
