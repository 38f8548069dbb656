"""Tests for the entity model and its inspection layer."""

from __future__ import annotations

import time

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from huddle.models import (
    BotEndpoint,
    Channel,
    Message,
    ReactionType,
    Server,
    ServerBotEndpoint,
    User,
    UserReaction,
    UserServer,
    describe_entities,
    describe_entity,
)

ENTITY_NAMES = [
    "User",
    "Server",
    "Channel",
    "Message",
    "UserReaction",
    "ReactionType",
    "BotEndpoint",
    "ServerBotEndpoint",
    "UserServer",
]


def test_describe_entities_lists_every_entity_in_declaration_order():
    entities = describe_entities()

    assert [entity.name for entity in entities] == ENTITY_NAMES
    assert [entity.table for entity in entities] == [
        "users",
        "servers",
        "channels",
        "messages",
        "user_reactions",
        "reaction_types",
        "bot_endpoints",
        "server_bot_endpoints",
        "user_servers",
    ]


def test_user_fields_and_primary_key():
    user = describe_entity(User)

    assert user.fields == {
        "id": "integer",
        "name": "text",
        "active": "boolean",
        "icon_image": "text",
    }
    assert user.primary_key == ("id",)
    assert user.foreign_keys == {}
    assert not user.is_association


def test_message_fields_and_foreign_keys():
    message = describe_entity(Message)

    assert message.fields["text"] == "text"
    assert message.fields["created_at"] == "timestamp"
    assert message.foreign_keys == {"user_id": "users.id", "channel_id": "channels.id"}


def test_relationship_kinds_and_join_fields():
    channel = describe_entity(Channel)

    server = channel.relationship("server")
    assert server.kind == "belongs-to"
    assert server.target == "Server"
    assert server.join == ("server_id", "id")

    messages = channel.relationship("messages")
    assert messages.kind == "has-many"
    assert messages.target == "Message"
    assert messages.join == ("id", "channel_id")


def test_many_to_many_relationships_name_their_association():
    user_servers = describe_entity(User).relationship("servers")
    assert user_servers.kind == "many-to-many"
    assert user_servers.target == "Server"
    assert user_servers.association == "user_servers"
    assert user_servers.join == ("id", "user_id")
    assert user_servers.association_join == ("server_id", "id")

    bots = describe_entity(Server).relationship("bot_endpoints")
    assert bots.kind == "many-to-many"
    assert bots.association == "server_bot_endpoints"
    assert bots.join == ("id", "server_id")
    assert bots.association_join == ("bot_endpoint_id", "id")


def test_association_entities():
    user_server = describe_entity(UserServer)
    assert user_server.is_association
    assert user_server.primary_key == ("user_id", "server_id")

    server_bot = describe_entity(ServerBotEndpoint)
    assert server_bot.is_association
    assert server_bot.primary_key == ("id",)

    assert not describe_entity(UserReaction).is_association
    assert not describe_entity(BotEndpoint).is_association


def test_unknown_relationship_raises_key_error():
    with pytest.raises(KeyError):
        describe_entity(ReactionType).relationship("servers")


@pytest.fixture()
def channel(db_session):
    server = Server(name="Guild")
    db_session.add(server)
    db_session.commit()
    channel = Channel(name="general", server_id=server.id)
    db_session.add(channel)
    db_session.commit()
    return channel


@pytest.fixture()
def author(db_session):
    user = User(name="bob", active=True, icon_image="")
    db_session.add(user)
    db_session.commit()
    return user


def test_message_created_at_is_assigned_by_the_store(db_session, channel, author):
    stamps = []
    for index in range(3):
        message = Message(text=f"hello {index}", user_id=author.id, channel_id=channel.id)
        db_session.add(message)
        db_session.commit()
        db_session.refresh(message)
        stamps.append(message.created_at)
        time.sleep(0.01)

    assert all(stamp is not None for stamp in stamps)
    assert stamps == sorted(stamps)


def test_foreign_keys_are_enforced(db_session, author):
    db_session.add(Message(text="orphan", user_id=author.id, channel_id=9999))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_relationships_navigate_between_entities(db_session, channel, author):
    reaction_type = ReactionType(emoji=":wave:")
    bot = BotEndpoint(endpoint="https://bots.example/hook")
    db_session.add_all([reaction_type, bot])
    db_session.commit()

    message = Message(text="hi", user_id=author.id, channel_id=channel.id)
    db_session.add(message)
    db_session.commit()

    db_session.add_all(
        [
            UserReaction(message_id=message.id, user_id=author.id, reaction_type_id=reaction_type.id),
            UserServer(user_id=author.id, server_id=channel.server_id),
            ServerBotEndpoint(bot_endpoint_id=bot.id, server_id=channel.server_id),
        ]
    )
    db_session.commit()

    server = db_session.execute(select(Server).where(Server.id == channel.server_id)).scalar_one()
    assert [user.name for user in server.users] == ["bob"]
    assert [endpoint.endpoint for endpoint in server.bot_endpoints] == ["https://bots.example/hook"]
    assert [item.name for item in server.channels] == ["general"]
    assert message.reactions[0].reaction_type.emoji == ":wave:"
    assert author.servers[0].id == server.id
