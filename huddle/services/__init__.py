"""Service layer helpers."""

from .users import create_user, decode_user

__all__ = ["create_user", "decode_user"]
