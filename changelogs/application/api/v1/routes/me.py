"""Current-user endpoint."""

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from pydantic import BaseModel

from changelogs.domain.auth.model.value import UserId
from changelogs.domain.auth.service.account import AccountResolver
from changelogs.domain.shared.error import UnauthenticatedError

router = APIRouter(prefix="/auth", tags=["Authentication"], route_class=DishkaRoute)


class UserResponse(BaseModel):
    """Response containing the signed-in user's profile."""

    id: str
    email: str
    name: str | None
    picture: str | None


@router.get("/me", response_model=UserResponse)
async def get_me(
    user_id: FromDishka[UserId],
    account_resolver: FromDishka[AccountResolver],
) -> UserResponse:
    """Get the current authenticated user."""
    user = await account_resolver.get_user(user_id)

    # Valid signature but the account is gone
    if user is None:
        raise UnauthenticatedError("User not found", code="user_not_found")

    return UserResponse(
        id=str(user.id),
        email=user.email,
        name=user.name,
        picture=user.picture,
    )
