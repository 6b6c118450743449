"""
Pytest configuration and fixtures for the attachments inspector tests
"""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.future import select
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

from attachments_inspector.auth import create_access_token  # noqa: E402
from attachments_inspector.database import Base, get_db  # noqa: E402
from attachments_inspector.models.post import (  # noqa: E402
    ATTACHED_FILE_META_KEY,
    ATTACHMENT_METADATA_META_KEY,
    IMAGE_ALT_META_KEY,
    Post,
    PostMeta,
)
from attachments_inspector.models.user import Role, User  # noqa: E402
from attachments_inspector.services.email_service import EmailService  # noqa: E402

# Test database URL (SQLite in-memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

# Placeholder hash; tests authenticate with tokens, never passwords
TEST_PASSWORD_HASH = "$2b$12$KIXQJ4sWw0dqj8Dz6kQ8EeTt0y2zB5u3gS4o3YVQmJw3d8m1rH2yS"


@pytest.fixture(scope="function", autouse=True)
async def setup_database():
    """Create a fresh database for each test function"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        roles_data = [
            {"name": "user", "permissions": []},
            {"name": "editor", "permissions": []},
            {"name": "admin", "permissions": []},
        ]
        for role_data in roles_data:
            session.add(Role(**role_data))
        await session.commit()

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionLocal() as session:
        yield session


async def override_get_db():
    async with TestSessionLocal() as session:
        yield session


@pytest.fixture
def mailer():
    """Mailer that never touches SMTP"""
    mock = MagicMock(spec=EmailService)
    mock.send_lifecycle_notification.return_value = True
    return mock


@pytest.fixture
def test_app(mailer):
    """Application built through the composition root, bound to the test database"""
    from main import create_app

    application = create_app(mailer=mailer)
    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


# ── Users ─────────────────────────────────────────────────────────────────────


async def _create_user(session: AsyncSession, role_name: str, email: str) -> User:
    result = await session.execute(select(Role).where(Role.name == role_name))
    role = result.scalars().first()
    user = User(username=email.split("@")[0], email=email, hashed_password=TEST_PASSWORD_HASH, role_id=role.id)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session) -> User:
    """User with the 'user' role (no edit_posts)"""
    return await _create_user(db_session, "user", "testuser@example.com")


@pytest.fixture
async def test_editor(db_session) -> User:
    """User with the 'editor' role"""
    return await _create_user(db_session, "editor", "editor@example.com")


def get_auth_headers(user_email: str) -> dict:
    """Generate authentication headers for a user"""
    token = create_access_token(data={"sub": user_email}, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers(test_editor) -> dict:
    return get_auth_headers(test_editor.email)


@pytest.fixture
def user_headers(test_user) -> dict:
    return get_auth_headers(test_user.email)


# ── Posts and attachments ─────────────────────────────────────────────────────


@pytest.fixture
def post_factory(db_session):
    """Create posts: await post_factory(title=..., parent_id=...)"""

    async def _create(
        title: str = "Post",
        post_type: str = "post",
        status: str = "publish",
        parent_id: int = 0,
        content: str = "",
        created_at: datetime | None = None,
    ) -> Post:
        post = Post(
            title=title,
            post_type=post_type,
            status=status,
            parent_id=parent_id,
            content=content,
            excerpt="",
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(post)
        await db_session.commit()
        return post

    return _create


@pytest.fixture
def attachment_factory(db_session):
    """Create attachments: await attachment_factory(parent_id, mime_type=..., ...)"""

    async def _create(
        parent_id: int,
        title: str = "Attachment",
        mime_type: str = "image/jpeg",
        menu_order: int = 0,
        status: str = "inherit",
        file: str | None = "2024/05/photo.jpg",
        alt: str | None = None,
        metadata: dict | None = None,
        caption: str = "",
        description: str = "",
    ) -> Post:
        meta = []
        if file is not None:
            meta.append(PostMeta(meta_key=ATTACHED_FILE_META_KEY, meta_value=file))
        if alt is not None:
            meta.append(PostMeta(meta_key=IMAGE_ALT_META_KEY, meta_value=alt))
        if metadata is not None:
            meta.append(PostMeta(meta_key=ATTACHMENT_METADATA_META_KEY, meta_value=metadata))

        attachment = Post(
            title=title,
            post_type="attachment",
            status=status,
            parent_id=parent_id,
            menu_order=menu_order,
            mime_type=mime_type,
            excerpt=caption,
            content=description,
            created_at=datetime.now(timezone.utc),
            meta=meta,
        )
        db_session.add(attachment)
        await db_session.commit()
        return attachment

    return _create


@pytest.fixture
def auth_headers():
    """Build bearer headers for any email: auth_headers("x@example.com")"""
    return get_auth_headers


@pytest.fixture
def user_factory(db_session):
    """Create users with a given role: await user_factory("admin", "admin@example.com")"""

    async def _create(role_name: str, email: str) -> User:
        return await _create_user(db_session, role_name, email)

    return _create
