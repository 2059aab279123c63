"""
UniRate - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'development'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['REVIEW_DEFAULT_STATUS'] = 'pending'
os.environ['RECAPTCHA_SECRET_KEY'] = ''
os.environ['SMTP_HOST'] = ''

from app.main import app
from app.core.database import Base, get_db
from app.models import Course, Department, Professor, User, UserRole, UserStatus
from app.core.security import get_password_hash, create_access_token

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


def make_user(role: UserRole = UserRole.student, password: str = 'testpassword123', **overrides) -> User:
    """Unsaved user with unique email and username"""
    fields = dict(
        name=fake.name(),
        username=f"{fake.user_name()}{fake.unique.random_int(1000, 999999)}",
        email=fake.unique.email(),
        hashed_password=get_password_hash(password),
        role=role,
        status=UserStatus.active,
        is_verified=True,
    )
    fields.update(overrides)
    return User(**fields)


def bearer(user: User) -> dict:
    token = create_access_token({'sub': str(user.id), 'username': user.username})
    return {'Authorization': f'Bearer {token}'}


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


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    user = make_user()
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second student, for ownership checks"""
    user = make_user()
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    user = make_user(role=UserRole.admin, password='adminpassword123')
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def user_factory(db_session: AsyncSession):
    """Create and persist extra users: ``await user_factory(role=UserRole.admin)``"""
    async def create(**kwargs) -> User:
        user = make_user(**kwargs)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return create


@pytest.fixture
def token_for():
    """Authorization headers for any user"""
    return bearer


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return bearer(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return bearer(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return bearer(admin_user)


@pytest.fixture
async def department(db_session: AsyncSession) -> Department:
    department = Department(
        name='Computer Science',
        code='CS',
        faculty='Arts and Sciences',
        description='Computing',
    )
    db_session.add(department)
    await db_session.commit()
    return department


@pytest.fixture
async def course(db_session: AsyncSession, department: Department) -> Course:
    course = Course(
        course_number='101',
        name='Intro to Programming',
        department=department,
        credit_hours=3,
        description='',
        prerequisites=[],
        corequisites=[],
    )
    db_session.add(course)
    await db_session.commit()
    return course


@pytest.fixture
async def professor(db_session: AsyncSession, department: Department, course: Course) -> Professor:
    professor = Professor(
        name='Jane Doe',
        title='Associate Professor',
        email='jane.doe@university.edu',
        avg_rating=0,
        departments=[department],
        courses=[course],
    )
    db_session.add(professor)
    await db_session.commit()
    return professor
