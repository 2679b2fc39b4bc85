from datetime import datetime

from pydantic import BaseModel, Field, field_validator

UPDATABLE_FIELDS = ("author", "title", "content")


def is_blank(text: str) -> bool:
    return not text.strip()


class NotBlankMixin:
    """Reject blank text and explicit nulls; values are stored exactly as sent."""

    @field_validator(*UPDATABLE_FIELDS)
    @classmethod
    def validate_not_blank(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Field may not be null")
        if is_blank(value):
            raise ValueError("Field may not be blank")
        return value


class PostCreate(NotBlankMixin, BaseModel):
    author: str = Field(..., min_length=1, description="Post author")
    title: str = Field(..., min_length=1, description="Post title")
    content: str = Field(..., min_length=1, description="Post content")


class PostUpdate(NotBlankMixin, BaseModel):
    id: str | None = Field(None, description="Must equal the path id when present")
    author: str | None = Field(None, min_length=1, description="New author")
    title: str | None = Field(None, min_length=1, description="New title")
    content: str | None = Field(None, min_length=1, description="New content")

    def changes(self) -> dict[str, str]:
        """Return only the updatable fields the client actually sent."""
        return self.model_dump(include=set(UPDATABLE_FIELDS), exclude_unset=True)


class PostOut(BaseModel):
    id: str = Field(..., description="Post ID")
    author: str = Field(..., description="Post author")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post content")
    created_at: datetime = Field(..., description="Post creation timestamp")

    model_config = {"from_attributes": True}


class PostList(BaseModel):
    posts: list[PostOut] = Field(..., description="Every stored post in insertion order")
