from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from huddle.models.base import Base

# Declaration order is the preferred table creation order; provisioning only
# moves a table later when it references one declared after it.


class User(Base):
    """Platform account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    icon_image: Mapped[str] = mapped_column(Text, default="", nullable=False)

    messages: Mapped[list["Message"]] = relationship(back_populates="user")
    reactions: Mapped[list["UserReaction"]] = relationship(back_populates="user")
    server_links: Mapped[list["UserServer"]] = relationship(back_populates="user")
    servers: Mapped[list["Server"]] = relationship(secondary="user_servers", viewonly=True)


class Server(Base):
    """Community grouping users, channels and bot integrations."""

    __tablename__ = "servers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)

    channels: Mapped[list["Channel"]] = relationship(back_populates="server")
    user_links: Mapped[list["UserServer"]] = relationship(back_populates="server")
    bot_links: Mapped[list["ServerBotEndpoint"]] = relationship(back_populates="server")
    users: Mapped[list["User"]] = relationship(secondary="user_servers", viewonly=True)
    bot_endpoints: Mapped[list["BotEndpoint"]] = relationship(
        secondary="server_bot_endpoints", viewonly=True
    )


class Channel(Base):
    """Text channel inside a server."""

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    server_id: Mapped[int] = mapped_column(ForeignKey("servers.id"), nullable=False, index=True)

    server: Mapped[Server] = relationship(back_populates="channels")
    messages: Mapped[list["Message"]] = relationship(back_populates="channel")


class Message(Base):
    """Message posted by a user to a channel."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    channel_id: Mapped[int] = mapped_column(ForeignKey("channels.id"), nullable=False, index=True)

    user: Mapped[User] = relationship(back_populates="messages")
    channel: Mapped[Channel] = relationship(back_populates="messages")
    reactions: Mapped[list["UserReaction"]] = relationship(back_populates="message")


class UserReaction(Base):
    """Reaction left by a user on a message."""

    __tablename__ = "user_reactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    message_id: Mapped[int] = mapped_column(ForeignKey("messages.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    reaction_type_id: Mapped[int] = mapped_column(ForeignKey("reaction_types.id"), nullable=False)

    message: Mapped[Message] = relationship(back_populates="reactions")
    user: Mapped[User] = relationship(back_populates="reactions")
    reaction_type: Mapped["ReactionType"] = relationship(back_populates="reactions")


class ReactionType(Base):
    """Emoji available as a reaction."""

    __tablename__ = "reaction_types"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    emoji: Mapped[str] = mapped_column(String(64), nullable=False)

    reactions: Mapped[list[UserReaction]] = relationship(back_populates="reaction_type")


class BotEndpoint(Base):
    """External bot integration reachable over HTTP."""

    __tablename__ = "bot_endpoints"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    endpoint: Mapped[str] = mapped_column(String(512), nullable=False)

    server_links: Mapped[list["ServerBotEndpoint"]] = relationship(back_populates="bot_endpoint")
    servers: Mapped[list[Server]] = relationship(secondary="server_bot_endpoints", viewonly=True)


class ServerBotEndpoint(Base):
    """Link table between server and bot endpoint."""

    __tablename__ = "server_bot_endpoints"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    bot_endpoint_id: Mapped[int] = mapped_column(ForeignKey("bot_endpoints.id"), nullable=False)
    server_id: Mapped[int] = mapped_column(ForeignKey("servers.id"), nullable=False)

    bot_endpoint: Mapped[BotEndpoint] = relationship(back_populates="server_links")
    server: Mapped[Server] = relationship(back_populates="bot_links")


class UserServer(Base):
    """Link table between user and server."""

    __tablename__ = "user_servers"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    server_id: Mapped[int] = mapped_column(ForeignKey("servers.id"), primary_key=True)

    user: Mapped[User] = relationship(back_populates="server_links")
    server: Mapped[Server] = relationship(back_populates="user_links")
