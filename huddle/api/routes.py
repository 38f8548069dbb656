from fastapi import APIRouter

from huddle.api.users import router as users_router

router = APIRouter()

router.include_router(users_router)


@router.get("/health", tags=["system"])
def health_check() -> dict[str, str]:
    """Report liveness with a fixed {"message": "success"} reply; the store is not consulted."""
    return {"message": "success"}
