"""User intake endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from huddle.database import get_db
from huddle.services.users import create_user

router = APIRouter(tags=["users"])


async def read_body(request: Request) -> bytes:
    """Expose the raw request body so decoding stays in the write pipeline."""

    return await request.body()


@router.post("/AddUser")
def add_user(
    payload: bytes = Depends(read_body),
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """Create a user from a JSON body of ``name``, ``active`` and ``iconImage``."""

    create_user(db, payload)
    return {"message": "success"}
