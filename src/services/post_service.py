import importlib
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError, ValidationError
from db.repositories.decorators import handle_db_errors
import schemas.posts

logger = logging.getLogger(__name__)

ID_MISMATCH_MESSAGE = "Request path id and request body id values must match"


def _repo():
    # Resolved per call so tests can monkeypatch repository functions
    return importlib.import_module("db.repositories.post_repository")


@handle_db_errors("post")
async def _commit(db: AsyncSession) -> None:
    await db.commit()


async def list_posts(db: AsyncSession) -> schemas.posts.PostList:
    posts = await _repo().get_all_posts(db)
    return schemas.posts.PostList(posts=[schemas.posts.PostOut.model_validate(p) for p in posts])


async def get_post(db: AsyncSession, post_id: str) -> schemas.posts.PostOut:
    post = await _repo().get_post_by_id(db, post_id)
    if not post:
        raise NotFoundError(f"Post with id {post_id} not found")
    return schemas.posts.PostOut.model_validate(post)


async def create_post(db: AsyncSession, post_data: schemas.posts.PostCreate) -> schemas.posts.PostOut:
    post = await _repo().create_post(
        db,
        author=post_data.author,
        title=post_data.title,
        content=post_data.content,
    )
    await _commit(db)
    return schemas.posts.PostOut.model_validate(post)


async def update_post(db: AsyncSession, post_id: str, payload: schemas.posts.PostUpdate) -> None:
    if payload.id is not None and payload.id != post_id:
        logger.info("Rejecting update: path id %s differs from body id %s", post_id, payload.id)
        raise ValidationError(ID_MISMATCH_MESSAGE, details={"path_id": post_id, "body_id": payload.id})

    post = await _repo().update_post_by_id(db, post_id, payload.changes())
    if post is None:
        raise NotFoundError(f"Post with id {post_id} not found")
    await _commit(db)


async def delete_post(db: AsyncSession, post_id: str) -> None:
    deleted = await _repo().delete_post_by_id(db, post_id)
    if not deleted:
        raise NotFoundError(f"Post with id {post_id} not found")
    await _commit(db)
