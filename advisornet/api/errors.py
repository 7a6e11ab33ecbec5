from typing import NoReturn

from fastapi import HTTPException

STATUS_BY_CODE = {
    "invalid": 400,
    "invalid_invitation": 400,
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
    "failed": 500,
}


def raise_for_failure(error: str | None, code: str | None, default: int = 400) -> NoReturn:
    """Translate a failed component output into an HTTPException."""
    status_code = STATUS_BY_CODE.get(code or "", default)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    raise HTTPException(status_code=status_code, detail=error or "Request failed", headers=headers)
