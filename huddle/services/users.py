"""User creation pipeline: decode, validate, insert."""

from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from huddle.errors import DecodeError, WriteError
from huddle.models import User
from huddle.schemas import UserCreate, UserRead

logger = logging.getLogger(__name__)


def _format_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(item) for item in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


def decode_user(payload: bytes | str) -> UserCreate:
    """Parse a raw JSON payload into a :class:`UserCreate`."""

    try:
        return UserCreate.model_validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(_format_validation_error(exc)) from exc


def create_user(db: Session, payload: bytes | str) -> UserRead:
    """Persist a new user from a raw JSON payload.

    Issues a single insert. Raises :class:`DecodeError` before touching the
    store when the payload is invalid and :class:`WriteError` when the store
    rejects the insert; the session is rolled back in that case.
    """

    data = decode_user(payload)
    user = User(name=data.name, active=data.active, icon_image=data.icon_image)
    db.add(user)
    try:
        db.flush()
        result = UserRead.model_validate(user, from_attributes=True)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to store user %r", data.name)
        raise WriteError("Failed to store user") from exc

    logger.info("Created user %s (%s)", result.id, result.name)
    return result
