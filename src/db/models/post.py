from datetime import datetime, timezone
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text

from ..database import Base

POST_ID_LENGTH = 32


def generate_post_id() -> str:
    """Return a new opaque post identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Post(Base):
    """SQLAlchemy model representing a blog post.

    Attributes:
        id (str): Opaque identifier assigned by the store on insert.
        author (str): Author display name.
        title (str): Post title.
        content (str): Full post content (unbounded text).
        created_at (datetime): Creation timestamp (UTC).
        updated_at (datetime): Last modification timestamp (UTC).
    """

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("length(author) > 0", name="ck_posts_author_not_empty"),
        CheckConstraint("length(title) > 0", name="ck_posts_title_not_empty"),
        CheckConstraint("length(content) > 0", name="ck_posts_content_not_empty"),
    )

    id = Column(
        String(POST_ID_LENGTH),
        primary_key=True,
        default=generate_post_id,
        doc="Opaque post identifier",
    )
    author = Column(
        Text,
        nullable=False,
        doc="Post author",
    )
    title = Column(
        Text,
        nullable=False,
        doc="Post title",
    )
    content = Column(
        Text,
        nullable=False,
        doc="Full post content",
    )
    created_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True,
        doc="Post creation timestamp",
    )
    updated_at = Column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        doc="Last modification timestamp",
    )

    def __repr__(self) -> str:
        title_value = getattr(self, "title", None)
        if isinstance(title_value, str) and title_value:
            title_repr = title_value[:30] + "..." if len(title_value) > 30 else title_value
        else:
            title_repr = ""
        return f"<Post(id={self.id}, title={title_repr!r}, author={self.author!r})>"

    def __str__(self) -> str:
        title = getattr(self, "title", "") or ""
        author = getattr(self, "author", "") or "Unknown"
        return f"Post '{title}' by {author}"
