from collections.abc import Mapping
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models.post import Post
from db.repositories.decorators import handle_db_errors, with_retry

logger = logging.getLogger(__name__)

ALLOWED_UPDATE_FIELDS: frozenset[str] = frozenset({"author", "title", "content"})


@handle_db_errors("post")
async def create_post(db: AsyncSession, author: str, title: str, content: str) -> Post:
    new_post = Post(author=author, title=title, content=content)
    db.add(new_post)
    await db.flush()
    await db.refresh(new_post)
    logger.info("Created new post with id %s", new_post.id)
    return new_post


@handle_db_errors("post")
async def insert_many(db: AsyncSession, items: list[Mapping[str, str]]) -> list[Post]:
    posts = [Post(author=i["author"], title=i["title"], content=i["content"]) for i in items]
    db.add_all(posts)
    await db.flush()
    logger.info("Inserted %d posts", len(posts))
    return posts


@with_retry(log_prefix="fetching all posts")
async def get_all_posts(db: AsyncSession) -> list[Post]:
    stmt = select(Post).order_by(Post.created_at, Post.id)
    res = await db.execute(stmt)
    return list(res.scalars().all())


@with_retry(log_prefix="counting posts")
async def count_posts(db: AsyncSession) -> int:
    res = await db.execute(select(func.count(Post.id)))
    return int(res.scalar_one())


@with_retry(log_prefix="fetching post")
async def get_post_by_id(db: AsyncSession, post_id: str) -> Post | None:
    res = await db.execute(select(Post).where(Post.id == post_id))
    post = res.scalars().first()
    if not post:
        logger.info("Post with id %s not found", post_id)
    return post


@handle_db_errors("post")
async def update_post_by_id(db: AsyncSession, post_id: str, fields: Mapping[str, str]) -> Post | None:
    """Apply ``fields`` to the post and return it, or None when the post does not exist.

    Keys outside ALLOWED_UPDATE_FIELDS are ignored.
    """
    post = await get_post_by_id(db, post_id)
    if not post:
        logger.info("Skip update: post %s not found", post_id)
        return None

    changes = {k: v for k, v in fields.items() if k in ALLOWED_UPDATE_FIELDS}
    ignored = set(fields) - set(changes)
    if ignored:
        logger.warning("Ignoring non-updatable fields %s for post %s", sorted(ignored), post_id)
    if not changes:
        return post

    for field, value in changes.items():
        setattr(post, field, value)

    await db.flush()
    await db.refresh(post)
    logger.info("Updated %s for post %s", ", ".join(sorted(changes)), post_id)
    return post


@handle_db_errors("post")
async def delete_post_by_id(db: AsyncSession, post_id: str) -> bool:
    post = await get_post_by_id(db, post_id)
    if not post:
        logger.info("Skip delete: post %s not found", post_id)
        return False

    await db.delete(post)
    await db.flush()
    logger.info("Deleted post with id %s", post_id)
    return True


@handle_db_errors("post")
async def delete_all_posts(db: AsyncSession) -> int:
    """Drop every post in the collection. Returns the number of removed rows."""
    res = await db.execute(delete(Post))
    removed = res.rowcount or 0
    logger.warning("Deleted all posts (%d rows)", removed)
    return removed
