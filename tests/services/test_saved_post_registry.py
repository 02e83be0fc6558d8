"""Tests for the saved-post registry."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.exceptions import NotFoundError
from threadline.models import Posts, SavedPosts
from threadline.services.saved_posts import is_saved, list_saved, toggle_save, unsave


async def _saved_rows(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(SavedPosts).where(SavedPosts.user_id == user_id)  # type: ignore[arg-type]
    )
    return result.scalar() or 0


@pytest.mark.unit
class TestToggleSave:
    async def test_toggle_saves_then_unsaves(self, db_session: AsyncSession, test_post: Posts):
        assert await toggle_save(db_session, "user-1", test_post.id) is True
        assert await is_saved(db_session, "user-1", test_post.id) is True

        assert await toggle_save(db_session, "user-1", test_post.id) is False
        assert await is_saved(db_session, "user-1", test_post.id) is False
        assert await _saved_rows(db_session, "user-1") == 0

    async def test_toggle_missing_post(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await toggle_save(db_session, "user-1", 999)

    async def test_saves_are_per_user(self, db_session: AsyncSession, test_post: Posts):
        await toggle_save(db_session, "user-1", test_post.id)

        assert await is_saved(db_session, "user-2", test_post.id) is False

    async def test_lost_insert_race_reports_saved(
        self, db_session: AsyncSession, test_post: Posts, monkeypatch: pytest.MonkeyPatch
    ):
        """A concurrent save that wins the insert leaves the post saved."""
        winner = SavedPosts(user_id="user-1", post_id=test_post.id)
        db_session.add(winner)
        await db_session.commit()
        # The winning row was written by another request, not this session
        db_session.expunge(winner)

        async def stale_read(*args, **kwargs):
            return False

        monkeypatch.setattr("threadline.services.saved_posts.is_saved", stale_read)

        assert await toggle_save(db_session, "user-1", test_post.id) is True
        assert await _saved_rows(db_session, "user-1") == 1


@pytest.mark.unit
class TestUnsave:
    async def test_unsave_existing(self, db_session: AsyncSession, test_post: Posts):
        await toggle_save(db_session, "user-1", test_post.id)

        assert await unsave(db_session, "user-1", test_post.id) is True
        assert await is_saved(db_session, "user-1", test_post.id) is False

    async def test_unsave_not_saved(self, db_session: AsyncSession, test_post: Posts):
        assert await unsave(db_session, "user-1", test_post.id) is False


@pytest.mark.unit
class TestListSaved:
    async def test_anonymous_is_never_saved(self, db_session: AsyncSession, test_post: Posts):
        assert await is_saved(db_session, None, test_post.id) is False

    async def test_list_saved_most_recent_first(
        self, db_session: AsyncSession, test_post: Posts
    ):
        older = Posts(title="Older save", author_username="Bob")
        db_session.add(older)
        await db_session.commit()

        await toggle_save(db_session, "user-1", older.id)
        await toggle_save(db_session, "user-1", test_post.id)

        # Pin the timestamps so ordering does not depend on clock resolution
        rows = (await db_session.execute(select(SavedPosts))).scalars().all()
        for row in rows:
            year = 2020 if row.post_id == older.id else 2021
            row.created_at = datetime(year, 1, 1, tzinfo=UTC)
        await db_session.commit()

        posts = await list_saved(db_session, "user-1")

        assert [p.id for p in posts] == [test_post.id, older.id]
        assert await list_saved(db_session, "user-2") == []
