from fastapi import APIRouter

router = APIRouter(prefix="/ping", tags=["health"])


@router.get("", summary="Public health probe")
def ping() -> dict[str, str]:
    return {"status": "ok"}
