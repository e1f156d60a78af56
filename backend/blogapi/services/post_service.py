"""
Blog API Backend — Post Service (Business Logic)
==================================================

What:  The five post operations: list, get, create, update, delete.
How:   Each method validates its identifier, builds one typed query and
       performs exactly one DocumentStore call.
Who:   Called by route handlers in blogapi.routes.posts.
When:  Once per request; the service holds no per-request state.

Operation → Store call:
    list_posts   → find_many(AllDocuments())
    get_post     → find_one(ById)
    create_post  → insert_one(document)
    update_post  → update_one(ById, SetFields(title, content, updated_at))
    delete_post  → delete_one(ById)

Error Handling:
    MalformedIdentifierError is raised by ById.parse before the store is used.
    "Nothing matched" becomes NotFoundError. StoreFailureError from the store
    propagates unchanged to the global handler.
"""

import logging
from typing import List

from blogapi.exceptions import NotFoundError
from blogapi.models.post import PostDocument, utc_now
from blogapi.schemas.post import MessageResponse, PostPayload, PostResponse
from blogapi.store.base import DocumentStore
from blogapi.store.query import AllDocuments, ById, SetFields

logger = logging.getLogger(__name__)


class PostService:
    """
    Business logic layer for post operations.

    The store is injected at construction; one service instance is built per
    request by the get_post_service dependency.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_posts(self) -> List[PostResponse]:
        """Every post in natural order; an empty store yields []."""
        documents = await self.store.find_many(AllDocuments())
        return [
            PostResponse.from_post(PostDocument.from_document(document))
            for document in documents
        ]

    async def get_post(self, post_id: str) -> PostResponse:
        """
        Retrieve a single post.

        Raises:
            MalformedIdentifierError: post_id is not 24 hex characters (→ 400)
            NotFoundError: no post with that id (→ 404)
        """
        query = ById.parse(post_id)
        document = await self.store.find_one(query)
        if document is None:
            raise NotFoundError(resource="Post", resource_id=post_id)
        return PostResponse.from_post(PostDocument.from_document(document))

    async def create_post(self, payload: PostPayload) -> PostResponse:
        """
        Persist a new post.

        created_at and updated_at are both set to the same server time; the
        store assigns the id, which is copied onto the returned post.
        """
        post = PostDocument.new(title=payload.title, content=payload.content)
        post.id = await self.store.insert_one(post.to_document())
        logger.info("Post created: %s", post.id)
        return PostResponse.from_post(post)

    async def update_post(self, post_id: str, payload: PostPayload) -> PostResponse:
        """
        Overwrite title and content and refresh updated_at.

        id and created_at are never written. The response is the stored
        document after the update, not an echo of the request.

        Raises:
            MalformedIdentifierError: post_id is not 24 hex characters (→ 400)
            NotFoundError: no post with that id (→ 404)
        """
        query = ById.parse(post_id)
        update = SetFields(
            {
                "title": payload.title,
                "content": payload.content,
                "updated_at": utc_now(),
            }
        )
        document = await self.store.update_one(query, update)
        if document is None:
            raise NotFoundError(resource="Post", resource_id=post_id)
        logger.info("Post updated: %s", post_id)
        return PostResponse.from_post(PostDocument.from_document(document))

    async def delete_post(self, post_id: str) -> MessageResponse:
        """
        Remove a post.

        Raises:
            MalformedIdentifierError: post_id is not 24 hex characters (→ 400)
            NotFoundError: zero documents were deleted (→ 404)
        """
        query = ById.parse(post_id)
        deleted = await self.store.delete_one(query)
        if deleted == 0:
            raise NotFoundError(resource="Post", resource_id=post_id)
        logger.info("Post deleted: %s", post_id)
        return MessageResponse(message="Post deleted")
