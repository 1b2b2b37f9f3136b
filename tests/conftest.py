from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from zhelper.auth.jwt import create_access_token
from zhelper.configs.settings import Settings
from zhelper.db.database import create_engine, create_schema, create_session_factory
from zhelper.db.models import Procurement
from zhelper.main import create_app
from zhelper.repositories.procurement_repository import ProcurementRepository
from zhelper.services.procurement_data_manager import ProcurementDataManager

FZ_NUMBER_OF_SAVED_PROCUREMENT = 615
FZ_NUMBER_OF_SECOND_PROCUREMENT = 44


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-secret-key-for-unit-tests-only",
        LOG_LEVEL="WARNING",
    )


def seed_procurements() -> list[Procurement]:
    return [
        Procurement(
            fz_number=FZ_NUMBER_OF_SAVED_PROCUREMENT,
            uin="0373200040221000001",
            object_of="Office paper supply",
            publisher_name="City hospital No. 1",
            contract_price=Decimal("125000.50"),
            procedure_type="Electronic auction",
            stage="Submission of applications",
            created_at=datetime(2021, 1, 15, 10, 30, tzinfo=timezone.utc),
        ),
        Procurement(
            fz_number=FZ_NUMBER_OF_SECOND_PROCUREMENT,
            uin="0173100009521000045",
            object_of="Road repair works",
            publisher_name="Department of transport",
            contract_price=Decimal("9800000.00"),
            procedure_type="Open tender",
            stage="Completed",
            created_at=datetime(2021, 3, 10, 8, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest_asyncio.fixture
async def session(settings):
    engine = create_engine(settings)
    await create_schema(engine)
    factory = create_session_factory(engine)
    async with factory() as s:
        s.add_all(seed_procurements())
        await s.commit()
        yield s
    await engine.dispose()


@pytest.fixture
def manager(session) -> ProcurementDataManager:
    return ProcurementDataManager(ProcurementRepository(session))


@pytest_asyncio.fixture
async def app(settings):
    app = create_app(settings)
    await create_schema(app.state.engine)
    async with app.state.session_factory() as s:
        s.add_all(seed_procurements())
        await s.commit()
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def token_for(settings):
    def _make(*roles: str, user_id: str = "42", username: str = "tester") -> str:
        return create_access_token(user_id=user_id, username=username, roles=roles, settings=settings)

    return _make
