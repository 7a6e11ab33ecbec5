from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm

from advisornet.api.deps import (
    get_auth_adapter,
    get_policy,
    get_profile_repo,
    get_rules,
    get_session_context,
    get_user_repo,
)
from advisornet.api.errors import raise_for_failure
from advisornet.api.schemas import MeResponse, ProfileResponse, Token, UserResponse
from advisornet.components.auth import LoginInput, run_login
from advisornet.components.profiles import SessionContextOutput
from advisornet.rules.models import Rules

router = APIRouter()


@router.post("/login", response_model=Token)
def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    user_repo: Any = Depends(get_user_repo),
    profile_repo: Any = Depends(get_profile_repo),
    auth_adapter: Any = Depends(get_auth_adapter),
    policy: Any = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Authenticate a member and set the session cookie."""
    result = run_login(
        LoginInput(email=form_data.username, password=form_data.password),
        user_repo=user_repo,
        profile_repo=profile_repo,
        auth_adapter=auth_adapter,
        policy=policy,
    )
    if not result.success or not result.token:
        raise_for_failure(result.error, result.code, default=401)

    sessions = rules.auth.sessions
    max_age = sessions.ttl_minutes * 60
    response.set_cookie(
        key="access_token",
        value=f"Bearer {result.token}",
        httponly=sessions.cookie.http_only,
        max_age=max_age,
        expires=max_age,
        samesite=sessions.cookie.same_site,  # type: ignore[arg-type]
        secure=sessions.cookie.secure,
    )

    return Token(access_token=result.token, token_type="bearer")


@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    """Log out by clearing the session cookie."""
    response.delete_cookie(key="access_token")
    return {"status": "success"}


@router.get("/me", response_model=MeResponse)
def read_session(ctx: SessionContextOutput = Depends(get_session_context)) -> MeResponse:
    """Current user, their profile and approval state."""
    return MeResponse(
        user=UserResponse.model_validate(ctx.user),
        profile=ProfileResponse.model_validate(ctx.profile) if ctx.profile else None,
        is_admin=ctx.is_admin,
        is_approved=ctx.is_approved,
    )
