"""Pydantic schemas for API payloads."""

from .users import UserCreate, UserRead

__all__ = ["UserCreate", "UserRead"]
