import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Sequence

from app.application.interfaces.authorizer import Authorizer
from app.application.interfaces.peak_season_repo import PeakSeasonRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.peak_season_rule import PeakPricingType, PeakSeasonRule
from app.domain.errors import PeakSeasonRuleNotFoundError, PermissionDeniedError
from app.domain.services.pricing_engine import first_matching_rule, order_rules


@dataclass
class PeakPricingForDate:
    date: date
    is_peak_season: bool
    multiplier: Decimal
    fixed_increase: Decimal
    rule: PeakSeasonRule | None = None


class PeakPricingUseCase:
    def __init__(
        self,
        peak_season_repo: PeakSeasonRepo,
        authorizer: Authorizer,
        transaction_manager: TransactionManager,
    ) -> None:
        self._peak_season_repo = peak_season_repo
        self._authorizer = authorizer
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def get_rule(self, rule_id: int) -> PeakSeasonRule:
        rule = await self._peak_season_repo.get(rule_id)
        if not rule:
            raise PeakSeasonRuleNotFoundError(rule_id)
        return rule

    async def list_rules(self, active_only: bool = False) -> Sequence[PeakSeasonRule]:
        if active_only:
            return await self._peak_season_repo.list_active()
        return await self._peak_season_repo.find_all()

    async def for_date(self, day: date) -> PeakPricingForDate:
        rules = order_rules(await self._peak_season_repo.list_active())
        rule = first_matching_rule(day, rules)
        if rule is None:
            return PeakPricingForDate(
                date=day, is_peak_season=False, multiplier=Decimal("1.0"), fixed_increase=Decimal("0")
            )
        is_multiplier = rule.pricing_type == PeakPricingType.MULTIPLIER
        return PeakPricingForDate(
            date=day,
            is_peak_season=True,
            multiplier=rule.price_multiplier if is_multiplier else Decimal("1.0"),
            fixed_increase=Decimal("0") if is_multiplier else rule.fixed_increase,
            rule=rule,
        )

    async def create_rule(self, rule: PeakSeasonRule, actor_id: str | None) -> PeakSeasonRule:
        if not self._authorizer.is_privileged(actor_id):
            raise PermissionDeniedError(actor_id, "create peak season rule")

        async def work() -> PeakSeasonRule:
            return await self._peak_season_repo.create(rule)

        created = await self._transaction_manager.run(work)
        self._logger.info(
            "Peak season rule created",
            extra={"rule_id": created.id, "rule_name": created.name, "actor_id": actor_id},
        )
        return created

    async def update_rule(
        self, rule_id: int, changes: Mapping[str, Any], actor_id: str | None
    ) -> PeakSeasonRule:
        """
        Applies a partial update to a rule; deactivating it removes it from pricing.

        The merged rule is validated again, so a changed date range must stay ordered.
        """
        if not self._authorizer.is_privileged(actor_id):
            raise PermissionDeniedError(actor_id, f"update peak season rule {rule_id}")

        async def work() -> PeakSeasonRule:
            rule = await self.get_rule(rule_id)
            return await self._peak_season_repo.update(replace(rule, **changes))

        updated = await self._transaction_manager.run(work)
        self._logger.info(
            "Peak season rule updated",
            extra={
                "rule_id": updated.id,
                "changed_fields": sorted(changes),
                "is_active": updated.is_active,
                "actor_id": actor_id,
            },
        )
        return updated
