"""User routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from archrepo_api.db import get_store
from archrepo_api.models import Organization, User
from archrepo_api.schemas import ProjectResponse, UserCreate, UserResponse, UserUpdate
from archrepo_api.services import EntityStore, cascade
from archrepo_api.services.projects import list_projects_by_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    """Create a user. Emails are unique (409 on duplicates)."""
    async with store.transaction():
        if data.organization_id is not None:
            await store.get_by_id(Organization, data.organization_id)
        user = await store.insert(
            User(
                email=data.email,
                name=data.name,
                role=data.role,
                organization_id=data.organization_id,
            )
        )
    return user


@router.get("", response_model=list[UserResponse])
async def list_users(store: Annotated[EntityStore, Depends(get_store)]):
    return await store.list_where(User)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.get_by_id(User, user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    changes = data.changes()
    async with store.transaction():
        if changes.get("organization_id") is not None:
            await store.get_by_id(Organization, changes["organization_id"])
        user = await store.update(User, user_id, **changes)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    """Delete a user that is no longer attributed anywhere (409 otherwise)."""
    await cascade.delete_user(store, user_id)


@router.get("/{user_id}/projects", response_model=list[ProjectResponse])
async def list_user_projects(
    user_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    """Projects the user is a member of."""
    return await list_projects_by_user(store, user_id)
