"""
Pagewise Quick Start Example

A simple example to get you started with pagewise in 5 minutes.

Features covered:
- Declare the ordering on a model
- Offset pagination
- Cursor pagination, forward and backward
- Handling bad cursors

Run with: python example_quickstart.py
"""

import asyncio
from datetime import datetime, timedelta

from pydantic import BaseModel

from pagewise import (
    CursorPaginator,
    Direction,
    InMemoryDataSource,
    InvalidCursor,
    OffsetPaginator,
)


# ============================================================================
# 1. DECLARE YOUR ORDERING
# ============================================================================


class BlogPost(BaseModel):
    """A blog post, newest first; ids break ties between equal timestamps."""

    id: int
    title: str
    published_at: datetime

    class Settings:
        ordering = "-published_at"
        tie_breaker = "id"
        default_page_size = 3
        max_page_size = 10


def make_posts() -> list[BlogPost]:
    start = datetime(2025, 1, 1)
    return [
        BlogPost(id=i, title=f"Post #{i}", published_at=start + timedelta(days=i // 2))
        for i in range(1, 9)
    ]


# ============================================================================
# 2. ASYNC MAIN FUNCTION
# ============================================================================


async def main():
    """Run the quickstart example."""

    offset = OffsetPaginator.for_model(BlogPost)
    cursor = CursorPaginator.for_model(BlogPost)
    source = InMemoryDataSource(make_posts(), cursor.policy)

    # ====== OFFSET ======
    print("1️⃣  OFFSET - Page 2 of the archive")
    page = await offset.paginate(source, page=2)
    print(f"   Page {page.current_page}/{page.total_pages}: {[p.title for p in page.items]}")

    # ====== CURSOR FORWARD ======
    print("\n2️⃣  CURSOR - Walking the feed")
    token = None
    pages = []
    while True:
        feed = await cursor.paginate(source, cursor=token)
        pages.append(feed)
        print(f"   {[p.id for p in feed.items]} has_next={feed.has_next}")
        if not feed.has_next:
            break
        token = feed.next_cursor

    # ====== CURSOR BACKWARD ======
    print("\n3️⃣  CURSOR - Stepping back one page")
    back = await cursor.paginate(source, cursor=pages[-1].prev_cursor, direction=Direction.BACKWARD)
    print(f"   {[p.id for p in back.items]} (same as page {len(pages) - 1})")

    # ====== BAD CURSOR ======
    print("\n4️⃣  ERRORS - Tampered cursor")
    try:
        await cursor.paginate(source, cursor="not-base64!!")
    except InvalidCursor as e:
        print(f"   Rejected: {e}")


if __name__ == "__main__":
    asyncio.run(main())
