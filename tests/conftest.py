from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.api.deps import get_db, get_now
from app.models.project import Project
from app.models.backlink import Backlink
from app.models.expense import Expense
from app.models.link_resource import LinkResource
from app.models.enums import AdsenseStatus, BacklinkStatus, ExpenseCategory, ResourceType


# Use SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Wall clock seen by every request made through the test client
FIXED_NOW = datetime(2025, 3, 20, 12, 0)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_projects(test_session: AsyncSession) -> list[Project]:
    """Two sites: one healthy-looking, one with AdSense trouble."""
    stamp = datetime(2025, 1, 1, 9, 0)
    projects = [
        Project(
            name="Recipe Hub",
            site_url="https://recipehub.example",
            niche_category="food",
            adsense_status=AdsenseStatus.ACTIVE.value,
            created_at=stamp,
            updated_at=stamp,
        ),
        Project(
            name="Gadget Reviews",
            site_url="https://gadgets.example",
            niche_category="tech",
            adsense_status=AdsenseStatus.LIMITED.value,
            created_at=stamp,
            updated_at=stamp,
        ),
    ]
    test_session.add_all(projects)
    await test_session.commit()
    for p in projects:
        await test_session.refresh(p)
    return projects


@pytest_asyncio.fixture(scope="function")
async def test_expenses(
    test_session: AsyncSession, test_projects: list[Project]
) -> list[Expense]:
    """Expenses in the first days of January 2025 plus one in March."""
    recipe, gadgets = test_projects
    stamp = datetime(2025, 1, 1, 9, 0)
    expenses_data = [
        {"name": "recipehub.example", "amount": 10.0, "category": ExpenseCategory.DOMAIN.value,
         "project_id": recipe.id, "paid_at": datetime(2025, 1, 1, 10, 0)},
        {"name": "Vercel Pro", "amount": 20.0, "category": ExpenseCategory.HOSTING.value,
         "project_id": None, "paid_at": datetime(2025, 1, 3, 12, 0)},
        {"name": "Ahrefs", "amount": 0.1, "category": "Tool",
         "project_id": gadgets.id, "paid_at": datetime(2025, 1, 3, 18, 0)},
        {"name": "Ahrefs", "amount": 0.2, "category": ExpenseCategory.TOOL.value,
         "project_id": gadgets.id, "paid_at": datetime(2025, 3, 15, 8, 0)},
    ]

    expenses = []
    for data in expenses_data:
        e = Expense(created_at=stamp, updated_at=stamp, **data)
        test_session.add(e)
        expenses.append(e)

    await test_session.commit()
    for e in expenses:
        await test_session.refresh(e)

    return expenses


@pytest_asyncio.fixture(scope="function")
async def test_backlinks(
    test_session: AsyncSession, test_projects: list[Project]
) -> list[Backlink]:
    recipe, gadgets = test_projects
    backlinks_data = [
        {"project_id": recipe.id, "source_url": "https://blog.example/a", "cost": 5.0,
         "status": BacklinkStatus.LIVE.value, "created_at": datetime(2025, 1, 2, 9, 0)},
        {"project_id": recipe.id, "source_url": "https://blog.example/b", "cost": 0.0,
         "status": BacklinkStatus.PLANNED.value, "created_at": datetime(2025, 1, 2, 15, 0)},
        {"project_id": gadgets.id, "source_url": "https://forum.example/t/1", "cost": 12.5,
         "status": BacklinkStatus.LIVE.value, "created_at": datetime(2025, 1, 4, 11, 0)},
    ]

    backlinks = []
    for data in backlinks_data:
        b = Backlink(target_url="https://target.example", **data)
        test_session.add(b)
        backlinks.append(b)

    await test_session.commit()
    for b in backlinks:
        await test_session.refresh(b)

    return backlinks


@pytest_asyncio.fixture(scope="function")
async def test_resources(test_session: AsyncSession) -> list[LinkResource]:
    """A free directory and a paid guest post."""
    stamp = datetime(2025, 1, 1, 9, 0)
    resources = [
        LinkResource(
            name="Startup Directory",
            url="https://directory.example",
            type=ResourceType.DIRECTORY.value,
            da_score=40,
            created_at=stamp,
            updated_at=stamp,
        ),
        LinkResource(
            name="Food Blog Guest Post",
            url="https://foodblog.example/write-for-us",
            type=ResourceType.GUEST_POST.value,
            da_score=55,
            dr_score=60,
            price=50.0,
            is_free=False,
            created_at=stamp,
            updated_at=datetime(2025, 1, 2, 9, 0),
        ),
    ]
    test_session.add_all(resources)
    await test_session.commit()
    for r in resources:
        await test_session.refresh(r)
    return resources

@pytest_asyncio.fixture(scope="function")
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with the database dependency overridden."""

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
