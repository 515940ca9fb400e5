"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Reloj fijo (FakeClock) para vencimientos deterministas
- Servicios del núcleo sobre repositorios in-memory
- Los mismos servicios sobre SQLite in-memory (aiosqlite)
- Cliente HTTP de prueba (FastAPI TestClient)
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from itertools import count
from typing import Any, AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.dependencies import _in_memory_bundle, get_clock
from app.application.interfaces.clock import FakeClock
from app.application.services.availability_checker import AvailabilityChecker
from app.application.services.booking_lifecycle import BookingLifecycle
from app.application.services.extension_workflow import ExtensionWorkflow
from app.application.services.late_fee_calculator import LateFeeCalculator
from app.application.services.payment_ledger import PaymentLedger
from app.application.use_cases.check_availability import CheckAvailabilityUseCase
from app.application.use_cases.peak_pricing import PeakPricingUseCase
from app.application.use_cases.register_vehicle import RegisterVehicleUseCase
from app.config import Settings, get_settings
from app.domain.entities.booking import Booking
from app.domain.entities.peak_season_rule import PeakPricingType, PeakSeasonRule
from app.domain.entities.vehicle import Vehicle
from app.domain.services.pricing_engine import PricingEngine
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.extension_repo_sql import ExtensionRepoSQL
from app.infrastructure.db.repositories.late_fee_repo_sql import LateFeeRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.peak_season_repo_sql import PeakSeasonRepoSQL
from app.infrastructure.db.repositories.vehicle_repo_sql import VehicleRepoSQL
from app.infrastructure.db.tables import metadata
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryExtensionRepo,
    InMemoryLateFeeRepo,
    InMemoryPaymentRepo,
    InMemoryPeakSeasonRepo,
    InMemoryTransactionManager,
    InMemoryVehicleRepo,
)
from app.infrastructure.services.static_authorizer import StaticAuthorizer
from app.main import app

ADMIN_ID = "admin-1"
CUSTOMER_ID = "customer-1"
OTHER_CUSTOMER_ID = "customer-2"

# 2024-01-01 08:00 UTC: anterior a todas las reservas de los tests
NOW = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_reference_generator():
    """Fresh BR-TEST-#### sequence; share one instance across harnesses that share a database."""
    counter = count(1)

    def reference_generator() -> str:
        return f"BR-TEST-{next(counter):04d}"

    return reference_generator


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


# ============================================================================
# ARMADO DE SERVICIOS
# ============================================================================


@dataclass
class Harness:
    """Servicios del núcleo conectados a un juego de repositorios."""

    clock: FakeClock
    repos: dict[str, Any]
    tx_manager: Any
    availability: AvailabilityChecker
    check_availability: CheckAvailabilityUseCase
    bookings: BookingLifecycle
    extensions: ExtensionWorkflow
    late_fees: LateFeeCalculator
    payments: PaymentLedger
    peak_pricing: PeakPricingUseCase
    vehicles: RegisterVehicleUseCase

    async def add_vehicle(
        self,
        daily_rate: Decimal = Decimal("1000"),
        **kwargs,
    ) -> Vehicle:
        vehicle = Vehicle(name=kwargs.pop("name", "Toyota Vios"), daily_rate=daily_rate, **kwargs)
        return await self.vehicles.execute(vehicle, actor_id=ADMIN_ID)

    async def add_peak_rule(
        self,
        start: date,
        end: date,
        multiplier: Decimal | None = None,
        fixed_increase: Decimal | None = None,
        name: str = "Peak",
    ) -> PeakSeasonRule:
        rule = PeakSeasonRule(
            name=name,
            start_date=start,
            end_date=end,
            pricing_type=PeakPricingType.FIXED if fixed_increase else PeakPricingType.MULTIPLIER,
            price_multiplier=multiplier or Decimal("1.0"),
            fixed_increase=fixed_increase or Decimal("0"),
        )
        return await self.peak_pricing.create_rule(rule, actor_id=ADMIN_ID)

    async def book(
        self,
        vehicle_id: int,
        pickup: datetime,
        return_date: datetime,
        requester_id: str = CUSTOMER_ID,
    ) -> Booking:
        return await self.bookings.create(
            vehicle_id=vehicle_id,
            requester_id=requester_id,
            pickup_date=pickup,
            return_date=return_date,
        )

    async def confirmed_booking(self, vehicle_id: int, pickup: datetime, return_date: datetime) -> Booking:
        booking = await self.book(vehicle_id, pickup, return_date)
        return await self.bookings.approve(booking.id, ADMIN_ID)

    async def ongoing_booking(self, vehicle_id: int, pickup: datetime, return_date: datetime) -> Booking:
        booking = await self.confirmed_booking(vehicle_id, pickup, return_date)
        return await self.bookings.begin(booking.id, ADMIN_ID)


def build_harness(
    clock: FakeClock, repos: dict[str, Any], tx_manager: Any, reference_generator: Any = None
) -> Harness:
    authorizer = StaticAuthorizer([ADMIN_ID])
    pricing_engine = PricingEngine()
    availability = AvailabilityChecker(
        vehicle_repo=repos["vehicle_repo"], booking_repo=repos["booking_repo"]
    )

    if reference_generator is None:
        reference_generator = make_reference_generator()

    return Harness(
        clock=clock,
        repos=repos,
        tx_manager=tx_manager,
        availability=availability,
        check_availability=CheckAvailabilityUseCase(
            vehicle_repo=repos["vehicle_repo"],
            peak_season_repo=repos["peak_season_repo"],
            availability_checker=availability,
            pricing_engine=pricing_engine,
        ),
        bookings=BookingLifecycle(
            vehicle_repo=repos["vehicle_repo"],
            booking_repo=repos["booking_repo"],
            late_fee_repo=repos["late_fee_repo"],
            peak_season_repo=repos["peak_season_repo"],
            availability_checker=availability,
            pricing_engine=pricing_engine,
            authorizer=authorizer,
            clock=clock,
            transaction_manager=tx_manager,
            reference_generator=reference_generator,
        ),
        extensions=ExtensionWorkflow(
            vehicle_repo=repos["vehicle_repo"],
            booking_repo=repos["booking_repo"],
            extension_repo=repos["extension_repo"],
            peak_season_repo=repos["peak_season_repo"],
            availability_checker=availability,
            pricing_engine=pricing_engine,
            authorizer=authorizer,
            clock=clock,
            transaction_manager=tx_manager,
        ),
        late_fees=LateFeeCalculator(
            booking_repo=repos["booking_repo"],
            late_fee_repo=repos["late_fee_repo"],
            authorizer=authorizer,
            clock=clock,
            transaction_manager=tx_manager,
        ),
        payments=PaymentLedger(
            booking_repo=repos["booking_repo"],
            payment_repo=repos["payment_repo"],
            late_fee_repo=repos["late_fee_repo"],
            authorizer=authorizer,
            clock=clock,
            transaction_manager=tx_manager,
        ),
        peak_pricing=PeakPricingUseCase(
            peak_season_repo=repos["peak_season_repo"],
            authorizer=authorizer,
            transaction_manager=tx_manager,
        ),
        vehicles=RegisterVehicleUseCase(
            vehicle_repo=repos["vehicle_repo"],
            authorizer=authorizer,
            transaction_manager=tx_manager,
        ),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def harness(clock: FakeClock) -> Harness:
    """Servicios sobre repositorios in-memory."""
    repos = {
        "vehicle_repo": InMemoryVehicleRepo(),
        "booking_repo": InMemoryBookingRepo(),
        "extension_repo": InMemoryExtensionRepo(),
        "late_fee_repo": InMemoryLateFeeRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "peak_season_repo": InMemoryPeakSeasonRepo(),
    }
    return build_harness(clock, repos, InMemoryTransactionManager())


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================


@pytest_asyncio.fixture
async def test_engine():
    """Engine SQLite in-memory con todas las tablas creadas."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


def build_sql_harness(
    clock: FakeClock, session: AsyncSession, reference_generator: Any = None
) -> Harness:
    """Los mismos servicios sobre repositorios SQL ligados a una sesión."""
    repos = {
        "vehicle_repo": VehicleRepoSQL(session),
        "booking_repo": BookingRepoSQL(session),
        "extension_repo": ExtensionRepoSQL(session),
        "late_fee_repo": LateFeeRepoSQL(session),
        "payment_repo": PaymentRepoSQL(session),
        "peak_season_repo": PeakSeasonRepoSQL(session),
    }
    tx_manager = SQLAlchemyTransactionManager(session, base_delay=0.01)
    return build_harness(clock, repos, tx_manager, reference_generator)


@pytest_asyncio.fixture
async def sql_harness(clock: FakeClock, db_session: AsyncSession) -> Harness:
    return build_sql_harness(clock, db_session)


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================


@pytest.fixture
def client(clock: FakeClock) -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient sobre el bundle in-memory.
    Cada test arranca con repositorios vacíos y el reloj fijo.
    """
    _in_memory_bundle.cache_clear()
    app.dependency_overrides[get_settings] = lambda: Settings(
        use_in_memory=True, privileged_actor_ids=ADMIN_ID
    )
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    _in_memory_bundle.cache_clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Actor-Id": ADMIN_ID}


@pytest.fixture
def customer_headers() -> dict[str, str]:
    return {"X-Actor-Id": CUSTOMER_ID}


# ============================================================================
# MARKERS DE PYTEST
# ============================================================================


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: Tests que usan los repositorios SQL sobre SQLite"
    )
    config.addinivalue_line(
        "markers",
        "deadlock: Tests de reintento ante fallas de serialización"
    )
