"""
Users API — User Route Handlers
================================

What:  The five CRUD endpoints over /users.
Why:   The whole public surface of the service.
How:   Each handler gets a UserService bound to the request's collection,
       makes one call, and returns the result. Failures are raised as
       application exceptions and rendered by the global handlers in main.py.

Route Inventory:
    POST   /users          → 201 created document    | 400
    GET    /users          → 200 array of documents  | 400
    GET    /users/{id}     → 200 document            | 404 (empty) | 500
    PATCH  /users/{id}     → 200 updated document    | 404 (empty) | 400
    DELETE /users/{id}     → 200 deleted document    | 404 (empty) | 500

    `user_id` is taken as a plain string so malformed identifiers reach
    the service and produce each operation's documented status, instead of
    FastAPI's generic path validation error.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorCollection

from users_api.database import get_users_collection
from users_api.schemas.user import ErrorResponse, UserPayload, UserResponse
from users_api.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

_NOT_FOUND = {404: {"description": "No user with this ID (empty body)"}}


def get_user_service(
    collection: AsyncIOMotorCollection = Depends(get_users_collection),
) -> UserService:
    return UserService(collection)


@router.post(
    "/users",
    status_code=201,
    response_model=UserResponse,
    responses={
        201: {"description": "User created", "model": UserResponse},
        400: {"description": "Body failed validation or was rejected by the store", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: UserPayload,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Store the request body as a new user and return it with its `_id`."""
    return await service.create_user(payload)


@router.get(
    "/users",
    response_model=List[UserResponse],
    responses={400: {"description": "Store error", "model": ErrorResponse}},
    summary="List all users",
)
async def list_users(
    service: UserService = Depends(get_user_service),
) -> List[Dict[str, Any]]:
    return await service.list_users()


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={
        **_NOT_FOUND,
        500: {"description": "Malformed ID or store error", "model": ErrorResponse},
    },
    summary="Get a user by ID",
)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await service.get_user(user_id)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={
        **_NOT_FOUND,
        400: {"description": "Malformed ID, invalid field, or rejected update", "model": ErrorResponse},
    },
    summary="Update fields of a user",
)
async def update_user(
    user_id: str,
    payload: UserPayload,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """
    Partially update a user.

    Only fields present in the body are written; everything else, and the
    `_id`, stays as it was.
    """
    return await service.update_user(user_id, payload)


@router.delete(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={
        **_NOT_FOUND,
        500: {"description": "Malformed ID or store error", "model": ErrorResponse},
    },
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Delete a user and return the document as it was."""
    return await service.delete_user(user_id)
