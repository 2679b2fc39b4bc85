# api/post_controller.py
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_db
import schemas.posts as posts
from schemas.responses import ErrorResponse
from services import post_service

posts_router = APIRouter(prefix="/posts", tags=["Posts"])

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Post not found"}}
BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid request body"}}


@posts_router.get(
    "",
    response_model=posts.PostList,
    summary="List posts",
    description="Return every post wrapped in a `posts` envelope.",
)
async def list_posts(db: Annotated[AsyncSession, Depends(get_db)]) -> posts.PostList:
    return await post_service.list_posts(db=db)


@posts_router.get(
    "/{post_id}",
    response_model=posts.PostOut,
    summary="Get post by ID",
    responses=NOT_FOUND,
)
async def get_post(post_id: str, db: Annotated[AsyncSession, Depends(get_db)]) -> posts.PostOut:
    return await post_service.get_post(db=db, post_id=post_id)


@posts_router.post(
    "",
    response_model=posts.PostOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="Create a post from author, title and content. The store assigns the id.",
    responses=BAD_REQUEST,
)
async def create_post(
    db: Annotated[AsyncSession, Depends(get_db)],
    post_data: Annotated[posts.PostCreate, Body(...)],
) -> posts.PostOut:
    return await post_service.create_post(db=db, post_data=post_data)


@posts_router.put(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update post",
    description="Apply the supplied author, title and content values. A body id must match the path id.",
    responses={**NOT_FOUND, **BAD_REQUEST},
)
async def update_post(
    post_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    payload: Annotated[posts.PostUpdate, Body(...)],
) -> Response:
    await post_service.update_post(db=db, post_id=post_id, payload=payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@posts_router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete post",
    responses=NOT_FOUND,
)
async def delete_post(post_id: str, db: Annotated[AsyncSession, Depends(get_db)]) -> Response:
    await post_service.delete_post(db=db, post_id=post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
