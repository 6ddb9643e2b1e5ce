from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
import uuid

import pytest
import pytest_asyncio
from sqlalchemy import event, func, pool, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from app.exceptions import AuthenticationRequired, BackendUnavailable, NotFound, ValidationFailed
from app.models import Follow
from app.services import social
from helpers import add_follow, add_post, add_profile

T0 = datetime(2026, 9, 20, 8, 0, 0)


def db_error() -> OperationalError:
    return OperationalError("SELECT", {}, Exception("down"))


@pytest_asyncio.fixture
async def fk_db(sync_engine, db_file):
    """Session on an engine that enforces foreign keys, like the production databases."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", poolclass=pool.NullPool)

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
    await engine.dispose()


async def count_follows(db) -> int:
    result = await db.execute(select(func.count()).select_from(Follow))
    return result.scalar_one()


class TestProfiles:
    @pytest.mark.asyncio
    async def test_me_anonymous(self, db):
        me = await social.get_me(db, None)
        assert me.user is None
        assert me.profile is None

    @pytest.mark.asyncio
    async def test_me_with_profile(self, db, alice):
        me = await social.get_me(db, alice.id)
        assert me.user.id == alice.id
        assert me.profile.handle == "alice"

    @pytest.mark.asyncio
    async def test_me_without_profile_row(self, db):
        user_id = uuid.uuid4()
        me = await social.get_me(db, user_id)
        assert me.user.id == user_id
        assert me.profile is None

    @pytest.mark.asyncio
    async def test_profile_by_handle(self, db, bob):
        profile = await social.get_profile_by_handle(db, "bob")
        assert profile.id == bob.id

        with pytest.raises(NotFound):
            await social.get_profile_by_handle(db, "nobody")

    @pytest.mark.asyncio
    async def test_profile_lookup_failure_is_not_found(self):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=db_error())

        with pytest.raises(NotFound) as exc:
            await social.get_profile_by_handle(db, "bob")
        assert exc.value.detail == "Profile not found"


class TestFollows:
    @pytest.mark.asyncio
    async def test_follow_then_status(self, db, alice, bob):
        result = await social.follow_user(db, alice.id, bob.id)

        assert result.success
        assert not result.already_following
        assert await social.is_following(db, alice.id, bob.id)
        assert not await social.is_following(db, bob.id, alice.id)

    @pytest.mark.asyncio
    async def test_duplicate_follow_reports_already_following(self, db, seed, alice, bob):
        add_follow(seed, alice, bob)

        result = await social.follow_user(db, alice.id, bob.id)

        assert result.success
        assert result.already_following

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, db, alice):
        with pytest.raises(NotFound):
            await social.follow_user(db, alice.id, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_follow_requires_login(self, db, bob):
        with pytest.raises(AuthenticationRequired):
            await social.follow_user(db, None, bob.id)

    @pytest.mark.asyncio
    async def test_unfollow(self, db, seed, alice, bob):
        add_follow(seed, alice, bob)

        await social.unfollow_user(db, alice.id, bob.id)

        assert not await social.is_following(db, alice.id, bob.id)

    @pytest.mark.asyncio
    async def test_anonymous_is_not_following(self, db, bob):
        assert await social.is_following(db, None, bob.id) is False

    @pytest.mark.asyncio
    async def test_follow_without_own_profile_is_not_reported_as_duplicate(self, fk_db, bob):
        with pytest.raises(NotFound):
            await social.follow_user(fk_db, uuid.uuid4(), bob.id)
        assert await count_follows(fk_db) == 0

    @pytest.mark.asyncio
    async def test_follow_with_foreign_keys_enforced(self, fk_db, alice, bob):
        first = await social.follow_user(fk_db, alice.id, bob.id)
        second = await social.follow_user(fk_db, alice.id, bob.id)

        assert not first.already_following
        assert second.already_following
        assert await count_follows(fk_db) == 1

    @pytest.mark.asyncio
    async def test_lookup_failure_is_backend_unavailable(self, alice, bob):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=db_error())

        with pytest.raises(BackendUnavailable) as exc:
            await social.follow_user(db, alice.id, bob.id)
        assert exc.value.detail == "Failed to follow user"

    @pytest.mark.asyncio
    async def test_constraint_error_without_existing_row_is_backend_unavailable(self, alice, bob):
        known = MagicMock()
        known.scalars.return_value.all.return_value = [alice.id, bob.id]
        no_row = MagicMock()
        no_row.first.return_value = None
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[known, no_row, no_row])
        db.commit = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed")))
        db.rollback = AsyncMock()

        with pytest.raises(BackendUnavailable):
            await social.follow_user(db, alice.id, bob.id)
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_constraint_error_from_concurrent_follow_is_already_following(self, alice, bob):
        known = MagicMock()
        known.scalars.return_value.all.return_value = [alice.id, bob.id]
        no_row = MagicMock()
        no_row.first.return_value = None
        row = MagicMock()
        row.first.return_value = (uuid.uuid4(),)
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[known, no_row, row])
        db.commit = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))
        db.rollback = AsyncMock()

        result = await social.follow_user(db, alice.id, bob.id)

        assert result.already_following


class TestPosts:
    def test_post_body_rules(self):
        assert social.validate_post_body("  Casting call: gaffer  ") == "Casting call: gaffer"
        assert social.validate_post_body("  " + "p" * 1000 + "  ") == "p" * 1000
        with pytest.raises(ValidationFailed) as exc:
            social.validate_post_body("   ")
        assert exc.value.detail == "Post cannot be empty"
        with pytest.raises(ValidationFailed) as exc:
            social.validate_post_body("p" * 1001)
        assert exc.value.detail == "Post cannot exceed 1000 characters"

    @pytest.mark.asyncio
    async def test_create_and_list_user_posts(self, db, alice):
        await social.create_post(db, alice.id, "first day of principal photography")
        await social.create_post(db, alice.id, "that's a wrap")

        posts = await social.get_user_posts(db, alice.id)

        assert {p.body for p in posts} == {"first day of principal photography", "that's a wrap"}

    @pytest.mark.asyncio
    async def test_create_post_requires_login(self, db):
        with pytest.raises(AuthenticationRequired):
            await social.create_post(db, None, "hello")

    @pytest.mark.asyncio
    async def test_user_posts_newest_first_and_capped(self, db, seed, alice):
        for i in range(30):
            add_post(seed, alice, f"post {i}", T0 + timedelta(minutes=i))

        posts = await social.get_user_posts(db, alice.id)

        assert len(posts) == 25
        assert posts[0].body == "post 29"
        assert posts[-1].body == "post 5"

    @pytest.mark.asyncio
    async def test_user_posts_failure_returns_empty(self):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
        assert await social.get_user_posts(db, uuid.uuid4()) == []


class TestFeed:
    @pytest.mark.asyncio
    async def test_feed_only_has_followees_newest_first(self, db, seed, alice, bob, carol):
        add_follow(seed, alice, bob)
        add_follow(seed, alice, carol)
        dana = add_profile(seed, "dana", "Dana Producer")
        add_post(seed, bob, "bob early", T0)
        add_post(seed, carol, "carol mid", T0 + timedelta(hours=1))
        add_post(seed, bob, "bob late", T0 + timedelta(hours=2))
        add_post(seed, dana, "not followed", T0 + timedelta(hours=3))
        add_post(seed, alice, "own post", T0 + timedelta(hours=4))

        feed = await social.get_followers_feed(db, alice.id)

        assert [item.body for item in feed] == ["bob late", "carol mid", "bob early"]
        assert feed[0].author.handle == "bob"
        assert feed[1].author.full_name == "Carol Editor"

    @pytest.mark.asyncio
    async def test_feed_empty_without_follows(self, db, alice):
        assert await social.get_followers_feed(db, alice.id) == []

    @pytest.mark.asyncio
    async def test_feed_anonymous(self, db):
        assert await social.get_followers_feed(db, None) == []

    @pytest.mark.asyncio
    async def test_feed_query_failure_returns_empty(self):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=db_error())
        assert await social.get_followers_feed(db, uuid.uuid4()) == []

    @pytest.mark.asyncio
    async def test_feed_author_without_profile_uses_placeholders(self, db, seed, alice):
        ghost = SimpleNamespace(id=uuid.uuid4())
        add_follow(seed, alice, ghost)
        add_post(seed, ghost, "posted before the profile was removed", T0)

        [item] = await social.get_followers_feed(db, alice.id)

        assert item.author.id == ghost.id
        assert item.author.full_name == "Unknown User"
        assert item.author.handle == "unknown"
