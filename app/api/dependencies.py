from datetime import datetime, timezone
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AsyncSessionLocal
from app.application.interfaces.clock import Clock, SystemClock
from app.application.services.availability_checker import AvailabilityChecker
from app.application.services.booking_lifecycle import BookingLifecycle
from app.application.services.extension_workflow import ExtensionWorkflow
from app.application.services.late_fee_calculator import LateFeeCalculator
from app.application.services.payment_ledger import PaymentLedger
from app.application.use_cases.check_availability import CheckAvailabilityUseCase
from app.application.use_cases.peak_pricing import PeakPricingUseCase
from app.application.use_cases.register_vehicle import RegisterVehicleUseCase
from app.config import Settings, get_settings
from app.domain.services.pricing_engine import PricingEngine
from app.domain.value_objects.booking_reference import BookingReference
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.extension_repo_sql import ExtensionRepoSQL
from app.infrastructure.db.repositories.late_fee_repo_sql import LateFeeRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.peak_season_repo_sql import PeakSeasonRepoSQL
from app.infrastructure.db.repositories.vehicle_repo_sql import VehicleRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.extension_repo import InMemoryExtensionRepo
from app.infrastructure.in_memory.late_fee_repo import InMemoryLateFeeRepo
from app.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from app.infrastructure.in_memory.peak_season_repo import InMemoryPeakSeasonRepo
from app.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager
from app.infrastructure.in_memory.vehicle_repo import InMemoryVehicleRepo
from app.infrastructure.services.static_authorizer import StaticAuthorizer

_system_clock = SystemClock()


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


def get_clock() -> Clock:
    return _system_clock


def get_actor_id(
    actor_id: str | None = Header(default=None, convert_underscores=False, alias="X-Actor-Id"),
) -> str:
    if not actor_id or not actor_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id header is required",
        )
    return actor_id.strip()


@lru_cache(maxsize=1)
def _in_memory_bundle():
    return {
        "vehicle_repo": InMemoryVehicleRepo(),
        "booking_repo": InMemoryBookingRepo(),
        "extension_repo": InMemoryExtensionRepo(),
        "late_fee_repo": InMemoryLateFeeRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "peak_season_repo": InMemoryPeakSeasonRepo(),
        "tx_manager": InMemoryTransactionManager(),
    }


def _sql_bundle(settings: Settings, session: AsyncSession):
    return {
        "vehicle_repo": VehicleRepoSQL(session),
        "booking_repo": BookingRepoSQL(session),
        "extension_repo": ExtensionRepoSQL(session),
        "late_fee_repo": LateFeeRepoSQL(session),
        "payment_repo": PaymentRepoSQL(session),
        "peak_season_repo": PeakSeasonRepoSQL(session),
        "tx_manager": SQLAlchemyTransactionManager(
            session,
            max_attempts=settings.db_retry_attempts,
            base_delay=settings.db_retry_base_delay,
        ),
    }


def _generate_booking_reference() -> str:
    return str(BookingReference.generate(datetime.now(timezone.utc)))


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    if settings.use_in_memory:
        bundle = _in_memory_bundle()
    else:
        if not session:
            raise RuntimeError("DB session not available")
        bundle = _sql_bundle(settings, session)

    authorizer = StaticAuthorizer(settings.privileged_actors)
    pricing_engine = PricingEngine(
        weekly_discount_factor=settings.weekly_discount_factor,
        monthly_discount_factor=settings.monthly_discount_factor,
    )
    availability_checker = AvailabilityChecker(
        vehicle_repo=bundle["vehicle_repo"],
        booking_repo=bundle["booking_repo"],
    )

    return {
        "check_availability": CheckAvailabilityUseCase(
            vehicle_repo=bundle["vehicle_repo"],
            peak_season_repo=bundle["peak_season_repo"],
            availability_checker=availability_checker,
            pricing_engine=pricing_engine,
        ),
        "bookings": BookingLifecycle(
            vehicle_repo=bundle["vehicle_repo"],
            booking_repo=bundle["booking_repo"],
            late_fee_repo=bundle["late_fee_repo"],
            peak_season_repo=bundle["peak_season_repo"],
            availability_checker=availability_checker,
            pricing_engine=pricing_engine,
            authorizer=authorizer,
            clock=clock,
            transaction_manager=bundle["tx_manager"],
            reference_generator=_generate_booking_reference,
            require_settled_late_fee_to_complete=settings.require_settled_late_fee_to_complete,
        ),
        "extensions": ExtensionWorkflow(
            vehicle_repo=bundle["vehicle_repo"],
            booking_repo=bundle["booking_repo"],
            extension_repo=bundle["extension_repo"],
            peak_season_repo=bundle["peak_season_repo"],
            availability_checker=availability_checker,
            pricing_engine=pricing_engine,
            authorizer=authorizer,
            clock=clock,
            transaction_manager=bundle["tx_manager"],
        ),
        "late_fees": LateFeeCalculator(
            booking_repo=bundle["booking_repo"],
            late_fee_repo=bundle["late_fee_repo"],
            authorizer=authorizer,
            clock=clock,
            transaction_manager=bundle["tx_manager"],
            default_hourly_rate=settings.late_fee_hourly_rate,
        ),
        "payments": PaymentLedger(
            booking_repo=bundle["booking_repo"],
            payment_repo=bundle["payment_repo"],
            late_fee_repo=bundle["late_fee_repo"],
            authorizer=authorizer,
            clock=clock,
            transaction_manager=bundle["tx_manager"],
        ),
        "peak_pricing": PeakPricingUseCase(
            peak_season_repo=bundle["peak_season_repo"],
            authorizer=authorizer,
            transaction_manager=bundle["tx_manager"],
        ),
        "vehicles": RegisterVehicleUseCase(
            vehicle_repo=bundle["vehicle_repo"],
            authorizer=authorizer,
            transaction_manager=bundle["tx_manager"],
        ),
    }
