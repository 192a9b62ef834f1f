"""Normalized item types handed to the static-site build."""

from typing import TypedDict


class BlogPost(TypedDict):
    """A published blog post.

    Attributes:
        slug: URL-safe key of the post.
        title: Post title.
        description: Short summary.
        publishDate: ISO date (YYYY-MM-DD or full ISO datetime).
        readingTime: Human-readable reading time, e.g. "5 min".
        category: One of the blog categories ("Tutorial", "Productividad", ...).
        tags: Free-form tags.
        emoji: Emoji shown next to the post.
        cover: Cover image URL or mirrored public path, "" if none.
        notionId: ID of the source Notion page.
    """

    slug: str
    title: str
    description: str
    publishDate: str
    readingTime: str
    category: str
    tags: list[str]
    emoji: str
    cover: str
    notionId: str


class Lesson(TypedDict):
    """A published course lesson.

    Attributes:
        slug: URL-safe key of the lesson.
        title: Lesson title.
        description: Short summary.
        order: Position within the course (ascending).
        module: Course module name.
        emoji: Emoji shown next to the lesson.
        cover: Cover image URL or mirrored public path, "" if none.
        notionId: ID of the source Notion page.
    """

    slug: str
    title: str
    description: str
    order: int | float
    module: str
    emoji: str
    cover: str
    notionId: str
