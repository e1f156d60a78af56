"""
Blog API Backend — Posts Route Handlers
=========================================

What:  The five CRUD endpoints under /api/posts.
How:   Each handler receives a PostService via Depends() and returns its result;
       status codes for errors come from the global exception handlers.

Endpoints:
    GET    /api/posts          → 200 [Post]
    GET    /api/posts/{id}     → 200 Post
    POST   /api/posts          → 201 Post
    PUT    /api/posts/{id}     → 200 Post
    DELETE /api/posts/{id}     → 200 {"message": "Post deleted"}
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError

from blogapi.database import get_post_service
from blogapi.exceptions import MalformedBodyError, describe_validation_errors
from blogapi.schemas.post import (
    ErrorResponse,
    MessageResponse,
    PostPayload,
    PostResponse,
)
from blogapi.services.post_service import PostService
from blogapi.store.query import ById

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Posts"])

_invalid_id = {400: {"description": "Invalid ID", "model": ErrorResponse}}
_not_found = {404: {"description": "Post not found", "model": ErrorResponse}}
_store_error = {500: {"description": "Document store error", "model": ErrorResponse}}


@router.get(
    "/posts",
    response_model=List[PostResponse],
    responses={**_store_error},
    summary="List all posts",
)
async def list_posts(
    service: PostService = Depends(get_post_service),
) -> List[PostResponse]:
    """All posts in the store's natural order. No filtering or pagination."""
    return await service.list_posts()


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={**_invalid_id, **_not_found, **_store_error},
    summary="Get a single post by ID",
)
async def get_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.get_post(post_id)


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Body could not be decoded", "model": ErrorResponse}, **_store_error},
    summary="Create a post",
    description=(
        "Creates a post from title and content. The id and both timestamps are "
        "assigned by the server; any values sent for them are ignored."
    ),
)
async def create_post(
    payload: PostPayload,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.create_post(payload)


# ── PUT dependencies ─────────────────────────────────────────────────────
# Dependencies resolve in declaration order. The body is decoded in a
# dependency (not as a FastAPI body parameter) so a bad id is reported
# before a bad body.


def require_post_id(post_id: str) -> str:
    """Raises MalformedIdentifierError (400 "Invalid ID") for non-ObjectId paths."""
    ById.parse(post_id)
    return post_id


async def read_post_payload(request: Request) -> PostPayload:
    """Decode the JSON body into a PostPayload or raise MalformedBodyError."""
    try:
        data = await request.json()
    except ValueError as e:
        raise MalformedBodyError(message=f"body: Invalid JSON ({e})")
    try:
        return PostPayload.model_validate(data)
    except ValidationError as e:
        raise MalformedBodyError(
            message=describe_validation_errors(
                dict(error, loc=("body", *error["loc"])) for error in e.errors()
            )
        )


@router.put(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Invalid ID, or body could not be decoded", "model": ErrorResponse},
        **_not_found,
        **_store_error,
    },
    summary="Update a post",
    description=(
        "Replaces title and content and refreshes updated_at. The id and "
        "created_at are never modified. Returns the stored post after the update."
    ),
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": PostPayload.model_json_schema()}},
        }
    },
)
async def update_post(
    post_id: str = Depends(require_post_id),
    payload: PostPayload = Depends(read_post_payload),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.update_post(post_id, payload)


@router.delete(
    "/posts/{post_id}",
    response_model=MessageResponse,
    responses={**_invalid_id, **_not_found, **_store_error},
    summary="Delete a post",
)
async def delete_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
) -> MessageResponse:
    return await service.delete_post(post_id)
