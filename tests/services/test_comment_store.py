"""Tests for the comment store service."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config import DELETED_COMMENT_TEXT
from threadline.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from threadline.core.security import Identity
from threadline.models import Comments, Posts
from threadline.services.comment_store import (
    create_comment,
    edit_comment,
    get_comments_by_author,
    get_comments_for_post,
    has_user_commented,
    soft_delete_comment,
)


@pytest.mark.unit
class TestCreateComment:
    async def test_top_level_comment(self, db_session: AsyncSession, test_post: Posts):
        """Top-level comments have depth 0 and bump the post's count."""
        comment, count = await create_comment(db_session, test_post.id, "Alice", "Hi")

        assert comment.id is not None
        assert comment.depth == 0
        assert comment.parent_id is None
        assert comment.votes == 0
        assert count == 1

        await db_session.refresh(test_post)
        assert test_post.comment_count == 1

    async def test_reply_depth_follows_parent(self, db_session: AsyncSession, test_post: Posts):
        root, _ = await create_comment(db_session, test_post.id, "Alice", "root")
        reply, _ = await create_comment(db_session, test_post.id, "Bob", "reply", root.id)
        nested, count = await create_comment(
            db_session, test_post.id, "Alice", "nested", reply.id
        )

        assert reply.depth == 1
        assert nested.depth == 2
        assert nested.parent_id == reply.id
        assert count == 3

    async def test_missing_post(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await create_comment(db_session, 999, "Alice", "orphan")

    async def test_missing_parent(self, db_session: AsyncSession, test_post: Posts):
        with pytest.raises(NotFoundError):
            await create_comment(db_session, test_post.id, "Alice", "reply", parent_id=999)

    async def test_parent_on_other_post_rejected(
        self, db_session: AsyncSession, test_post: Posts
    ):
        other = Posts(title="Other", author_username="Bob")
        db_session.add(other)
        await db_session.commit()
        parent, _ = await create_comment(db_session, other.id, "Bob", "elsewhere")

        with pytest.raises(ValidationError):
            await create_comment(db_session, test_post.id, "Alice", "reply", parent.id)

    async def test_blank_content_rejected(self, db_session: AsyncSession, test_post: Posts):
        with pytest.raises(ValidationError):
            await create_comment(db_session, test_post.id, "Alice", "   ")

    async def test_stale_count_is_corrected(self, db_session: AsyncSession, test_post: Posts):
        """The count is recomputed from rows, not incremented."""
        test_post.comment_count = 17
        await db_session.commit()

        _, count = await create_comment(db_session, test_post.id, "Alice", "Hi")

        assert count == 1


@pytest.mark.unit
class TestSoftDelete:
    async def test_soft_delete_keeps_row_and_count(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        comment, _ = await create_comment(db_session, test_post.id, "Alice", "oops")
        reply, _ = await create_comment(db_session, test_post.id, "Bob", "reply", comment.id)

        deleted = await soft_delete_comment(db_session, comment.id, alice)

        assert deleted.content == DELETED_COMMENT_TEXT
        assert deleted.deleted_at is not None
        assert deleted.author_username == "Alice"
        assert deleted.depth == 0

        await db_session.refresh(test_post)
        await db_session.refresh(reply)
        assert test_post.comment_count == 2
        assert reply.parent_id == comment.id
        assert reply.deleted_at is None

    async def test_any_alias_authorizes(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        """Comments recorded under email or user id still belong to the user."""
        by_email, _ = await create_comment(db_session, test_post.id, "alice@example.com", "a")
        by_id, _ = await create_comment(db_session, test_post.id, "user-alice", "b")

        assert (await soft_delete_comment(db_session, by_email.id, alice)).deleted_at
        assert (await soft_delete_comment(db_session, by_id.id, alice)).deleted_at

    async def test_other_user_forbidden(
        self, db_session: AsyncSession, test_post: Posts, bob: Identity
    ):
        comment, _ = await create_comment(db_session, test_post.id, "Alice", "mine")

        with pytest.raises(AuthorizationError):
            await soft_delete_comment(db_session, comment.id, bob)

        await db_session.refresh(comment)
        assert comment.deleted_at is None

    async def test_delete_twice_is_noop(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        comment, _ = await create_comment(db_session, test_post.id, "Alice", "gone")
        first = await soft_delete_comment(db_session, comment.id, alice)
        deleted_at = first.deleted_at

        second = await soft_delete_comment(db_session, comment.id, alice)

        assert second.deleted_at == deleted_at
        assert second.content == DELETED_COMMENT_TEXT

    async def test_missing_comment(self, db_session: AsyncSession, alice: Identity):
        with pytest.raises(NotFoundError):
            await soft_delete_comment(db_session, 999, alice)


@pytest.mark.unit
class TestEditComment:
    async def test_edit_stamps_updated_at(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        comment, _ = await create_comment(db_session, test_post.id, "Alice", "draft")
        assert comment.updated_at is None

        edited = await edit_comment(db_session, comment.id, alice, "final")

        assert edited.content == "final"
        assert edited.updated_at is not None
        assert edited.depth == 0

    async def test_edit_by_other_user_forbidden(
        self, db_session: AsyncSession, test_post: Posts, bob: Identity
    ):
        comment, _ = await create_comment(db_session, test_post.id, "Alice", "draft")

        with pytest.raises(AuthorizationError):
            await edit_comment(db_session, comment.id, bob, "hijacked")

    async def test_edit_deleted_comment_rejected(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        comment, _ = await create_comment(db_session, test_post.id, "Alice", "draft")
        await soft_delete_comment(db_session, comment.id, alice)

        with pytest.raises(ValidationError):
            await edit_comment(db_session, comment.id, alice, "resurrected")


@pytest.mark.unit
class TestCommentQueries:
    async def test_comments_ordered_by_votes(self, db_session: AsyncSession, test_post: Posts):
        low = Comments(post_id=test_post.id, content="low", author_username="A", votes=-1)
        high = Comments(post_id=test_post.id, content="high", author_username="B", votes=5)
        mid_a = Comments(post_id=test_post.id, content="mid a", author_username="C", votes=1)
        mid_b = Comments(post_id=test_post.id, content="mid b", author_username="D", votes=1)
        for comment in (low, high, mid_a, mid_b):
            db_session.add(comment)
            await db_session.flush()
        await db_session.commit()

        comments = await get_comments_for_post(db_session, test_post.id)

        assert [c.content for c in comments] == ["high", "mid a", "mid b", "low"]

    async def test_deleted_comments_included(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        comment, _ = await create_comment(db_session, test_post.id, "Alice", "bye")
        await soft_delete_comment(db_session, comment.id, alice)

        comments = await get_comments_for_post(db_session, test_post.id)

        assert len(comments) == 1
        assert comments[0].deleted_at is not None

    async def test_comments_for_missing_post(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await get_comments_for_post(db_session, 999)

    async def test_has_user_commented(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity, bob: Identity
    ):
        assert await has_user_commented(db_session, alice, test_post.id) is False

        await create_comment(db_session, test_post.id, "alice@example.com", "hello")

        assert await has_user_commented(db_session, alice, test_post.id) is True
        assert await has_user_commented(db_session, bob, test_post.id) is False

    async def test_comments_by_author_matches_aliases(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        await create_comment(db_session, test_post.id, "Alice", "one")
        await create_comment(db_session, test_post.id, "user-alice", "two")
        await create_comment(db_session, test_post.id, "Bob", "three")

        comments = await get_comments_by_author(db_session, alice)

        assert sorted(c.content for c in comments) == ["one", "two"]


@pytest.mark.unit
class TestDepthStability:
    """Depth is fixed at creation; later changes to ancestors never move it."""

    async def test_depth_survives_parent_edit_and_delete(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        root, _ = await create_comment(db_session, test_post.id, "Alice", "root")
        reply, _ = await create_comment(db_session, test_post.id, "Alice", "reply", root.id)
        nested, _ = await create_comment(db_session, test_post.id, "Bob", "nested", reply.id)

        await edit_comment(db_session, reply.id, alice, "reply, edited")
        await soft_delete_comment(db_session, reply.id, alice)
        await soft_delete_comment(db_session, root.id, alice)

        for comment in (root, reply, nested):
            await db_session.refresh(comment)
        assert [root.depth, reply.depth, nested.depth] == [0, 1, 2]
        assert nested.parent_id == reply.id

    async def test_reply_to_deleted_parent_uses_stored_depth(
        self, db_session: AsyncSession, test_post: Posts, alice: Identity
    ):
        root, _ = await create_comment(db_session, test_post.id, "Alice", "root")
        reply, _ = await create_comment(db_session, test_post.id, "Alice", "reply", root.id)
        await soft_delete_comment(db_session, reply.id, alice)

        late, count = await create_comment(db_session, test_post.id, "Bob", "late", reply.id)

        assert late.depth == 2
        assert count == 3


@pytest.mark.unit
class TestCreateCommentLocking:
    """
    Creating a comment locks the post row before anything else, so concurrent
    comments on one post are serialized and each recount sees every row.

    SQLite ignores row locks, so the statements are checked as MySQL renders them.
    """

    async def test_post_is_locked_first(
        self, db_session: AsyncSession, test_post: Posts, mysql_statements: list[str]
    ):
        mysql_statements.clear()

        await create_comment(db_session, test_post.id, "Alice", "Hi")

        first = mysql_statements[0]
        assert "FROM posts" in first
        assert first.endswith("FOR UPDATE")

    async def test_recount_is_a_locking_read(
        self, db_session: AsyncSession, test_post: Posts, mysql_statements: list[str]
    ):
        mysql_statements.clear()

        await create_comment(db_session, test_post.id, "Alice", "Hi")

        [recount] = [s for s in mysql_statements if "count(comments.id)" in s]
        assert recount.endswith("FOR UPDATE")
