"""
SpacECE Casebook - Test Configuration and Fixtures
"""
import os
from datetime import date
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_LEVEL'] = 'WARNING'

from spacece.main import app
from spacece.core.database import Base, get_db
from spacece.core.security import get_password_hash, create_access_token
from spacece.models import User, UserRole, Child, Gender

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(db_session: AsyncSession, role: UserRole, **kwargs) -> User:
    user = User(
        email=kwargs.pop('email', fake.unique.email()),
        name=kwargs.pop('name', fake.name()),
        hashed_password=get_password_hash('testpassword123'),
        role=role,
        is_email_verified=True,
        **kwargs
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def headers_for(user: User) -> dict:
    """Generate authentication headers for a user"""
    token_data = {
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value
    }
    token = create_access_token(token_data)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def admin(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.ADMIN)


@pytest.fixture
async def parent(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.PARENT)


@pytest.fixture
async def other_parent(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.PARENT)


@pytest.fixture
async def plain_user(db_session: AsyncSession) -> User:
    """Role ``user`` behaves like a parent"""
    return await create_user(db_session, UserRole.USER)


@pytest.fixture
async def volunteer(db_session: AsyncSession) -> User:
    return await create_user(
        db_session,
        UserRole.VOLUNTEER,
        volunteer_profile={'status': 'Active', 'specializations': ['Speech']}
    )


@pytest.fixture
async def other_volunteer(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.VOLUNTEER)


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return headers_for(admin)


@pytest.fixture
def parent_headers(parent: User) -> dict:
    return headers_for(parent)


@pytest.fixture
def other_parent_headers(other_parent: User) -> dict:
    return headers_for(other_parent)


@pytest.fixture
def plain_user_headers(plain_user: User) -> dict:
    return headers_for(plain_user)


@pytest.fixture
def volunteer_headers(volunteer: User) -> dict:
    return headers_for(volunteer)


@pytest.fixture
def other_volunteer_headers(other_volunteer: User) -> dict:
    return headers_for(other_volunteer)


@pytest.fixture
async def child(db_session: AsyncSession, parent: User, volunteer: User) -> Child:
    """A toddler owned by ``parent`` and assigned to ``volunteer``"""
    record = Child(
        name=fake.first_name(),
        dob=date(date.today().year - 2, 1, 15),
        gender=Gender.FEMALE,
        parent_id=parent.id,
        volunteer_id=volunteer.id,
    )
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


@pytest.fixture
async def unassigned_child(db_session: AsyncSession, other_parent: User) -> Child:
    """A child with no volunteer, owned by ``other_parent``"""
    record = Child(
        name=fake.first_name(),
        dob=date(date.today().year - 4, 6, 1),
        gender=Gender.MALE,
        parent_id=other_parent.id,
    )
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record
