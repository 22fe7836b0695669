"""User API: thin routes delegating to IUserService.

Results are wrapped in the response envelope here; failures are raised
and wrapped by the exception handlers.
"""

from fastapi import APIRouter, Query

from crudkit.api.dependencies import UserServiceDep
from crudkit.application.dtos.user import UserCreate, UserUpdate
from crudkit.domain.exceptions import ResourceNotFoundException
from crudkit.schemas.response import ApiResponse
from crudkit.schemas.user import UserCreateRequest, UserDto, UserUpdateRequest

router = APIRouter()


@router.get("", response_model=ApiResponse[list[UserDto]])
async def list_users(service: UserServiceDep) -> ApiResponse[list[UserDto]]:
    """List all users."""
    users = await service.list_users()
    return ApiResponse[list[UserDto]].ok([UserDto.model_validate(u) for u in users])


@router.get("/by-email", response_model=ApiResponse[UserDto])
async def get_user_by_email(
    service: UserServiceDep,
    email: str = Query(..., min_length=3),
) -> ApiResponse[UserDto]:
    """Get user by email (natural key)."""
    user = await service.get_user_by_email(email)
    if user is None:
        raise ResourceNotFoundException("User", email)
    return ApiResponse[UserDto].ok(UserDto.model_validate(user))


@router.get("/{user_id}", response_model=ApiResponse[UserDto])
async def get_user(user_id: int, service: UserServiceDep) -> ApiResponse[UserDto]:
    """Get user by id."""
    user = await service.get_user(user_id)
    if user is None:
        raise ResourceNotFoundException("User", user_id)
    return ApiResponse[UserDto].ok(UserDto.model_validate(user))


@router.post("", response_model=ApiResponse[UserDto])
async def create_user(
    body: UserCreateRequest, service: UserServiceDep
) -> ApiResponse[UserDto]:
    """Create a user. Duplicate email -> 400 with the business-rule message."""
    user = await service.create_user(
        UserCreate(username=body.username, email=str(body.email), password=body.password)
    )
    return ApiResponse[UserDto].ok(UserDto.model_validate(user))


@router.put("/{user_id}", response_model=ApiResponse[UserDto])
async def update_user(
    user_id: int, body: UserUpdateRequest, service: UserServiceDep
) -> ApiResponse[UserDto]:
    """Partially update a user."""
    user = await service.update_user(
        user_id,
        UserUpdate(
            username=body.username,
            email=str(body.email) if body.email is not None else None,
            is_active=body.is_active,
        ),
    )
    return ApiResponse[UserDto].ok(UserDto.model_validate(user))


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(user_id: int, service: UserServiceDep) -> ApiResponse[None]:
    """Delete a user. Deleting a missing id succeeds."""
    await service.delete_user(user_id)
    return ApiResponse[None].ok(None)
