from decimal import Decimal
from typing import Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.peak_season_repo import PeakSeasonRepo
from app.domain.entities.peak_season_rule import PeakPricingType, PeakSeasonRule
from app.domain.errors import PeakSeasonRuleNotFoundError
from app.infrastructure.db.tables import peak_season_pricing


class PeakSeasonRepoSQL(PeakSeasonRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, rule_id: int) -> PeakSeasonRule | None:
        stmt = select(peak_season_pricing).where(peak_season_pricing.c.id == rule_id)
        row = (await self._session.execute(stmt)).mappings().first()
        return self._map_rule(row) if row else None

    async def list_active(self) -> Sequence[PeakSeasonRule]:
        stmt = (
            select(peak_season_pricing)
            .where(peak_season_pricing.c.is_active.is_(True))
            .order_by(peak_season_pricing.c.start_date, peak_season_pricing.c.id)
        )
        result = await self._session.execute(stmt)
        return [self._map_rule(row) for row in result.mappings().all()]

    async def find_all(self) -> Sequence[PeakSeasonRule]:
        stmt = select(peak_season_pricing).order_by(
            peak_season_pricing.c.start_date, peak_season_pricing.c.id
        )
        result = await self._session.execute(stmt)
        return [self._map_rule(row) for row in result.mappings().all()]

    async def create(self, rule: PeakSeasonRule) -> PeakSeasonRule:
        stmt = insert(peak_season_pricing).values(**self._values(rule))
        result = await self._session.execute(stmt)
        return await self.get(result.inserted_primary_key[0])

    async def update(self, rule: PeakSeasonRule) -> PeakSeasonRule:
        stmt = (
            update(peak_season_pricing)
            .where(peak_season_pricing.c.id == rule.id)
            .values(**self._values(rule))
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise PeakSeasonRuleNotFoundError(rule.id)
        return await self.get(rule.id)

    def _values(self, rule: PeakSeasonRule) -> dict:
        return {
            "name": rule.name,
            "start_date": rule.start_date,
            "end_date": rule.end_date,
            "pricing_type": rule.pricing_type.value,
            "price_multiplier": rule.price_multiplier,
            "fixed_increase": rule.fixed_increase,
            "is_active": rule.is_active,
            "notes": rule.notes,
        }

    def _map_rule(self, row) -> PeakSeasonRule:
        return PeakSeasonRule(
            id=row["id"],
            name=row["name"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            pricing_type=PeakPricingType(row["pricing_type"]),
            price_multiplier=Decimal(row["price_multiplier"]),
            fixed_increase=Decimal(row["fixed_increase"]),
            is_active=bool(row["is_active"]),
            notes=row.get("notes"),
        )
