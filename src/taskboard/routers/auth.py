from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from .. import auth
from ..auth import get_current_user_id
from ..errors import NotFound
from ..repositories import Repository, get_repository
from ..schemas import AuthResponse, Credentials, SuccessOut, UserOut
from ..settings import Settings, get_settings

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account and sign in by setting the identity cookie.",
    responses={
        201: {"description": "Account created"},
        400: {"description": "Missing email/password or password too short"},
        409: {"description": "Email already registered"},
    },
)
def register(
    payload: Credentials,
    response: Response,
    repo: Repository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    user, token = auth.register(repo, settings, payload.email, payload.password)
    auth.set_auth_cookie(response, token, settings)
    return AuthResponse(user=UserOut(id=user["id"], email=user["email"]))


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Verify credentials and set the identity cookie.",
    responses={
        200: {"description": "Signed in"},
        400: {"description": "Missing email or password"},
        401: {"description": "Invalid credentials"},
    },
)
def login(
    payload: Credentials,
    response: Response,
    repo: Repository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    user, token = auth.authenticate(repo, settings, payload.email, payload.password)
    auth.set_auth_cookie(response, token, settings)
    return AuthResponse(user=UserOut(id=user["id"], email=user["email"]))


# PUBLIC_INTERFACE
@router.post(
    "/logout",
    response_model=SuccessOut,
    summary="Logout",
    description="Clear the identity cookie. Succeeds whether or not the caller is signed in.",
)
def logout(response: Response, settings: Settings = Depends(get_settings)) -> SuccessOut:
    auth.clear_auth_cookie(response, settings)
    return SuccessOut(success=True)


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=UserOut,
    summary="Current user",
    description="Return the signed-in user.",
    responses={
        200: {"description": "Signed-in user"},
        401: {"description": "Not authenticated"},
        404: {"description": "User no longer exists"},
    },
)
def me(
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
) -> UserOut:
    user = repo.get_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return UserOut(id=user["id"], email=user["email"])
