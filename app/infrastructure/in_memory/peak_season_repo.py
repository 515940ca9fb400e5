from copy import deepcopy
from typing import Sequence

from app.application.interfaces.peak_season_repo import PeakSeasonRepo
from app.domain.entities.peak_season_rule import PeakSeasonRule
from app.domain.errors import PeakSeasonRuleNotFoundError


class InMemoryPeakSeasonRepo(PeakSeasonRepo):
    def __init__(self) -> None:
        self.rules: dict[int, PeakSeasonRule] = {}
        self._next_id = 1

    async def get(self, rule_id: int) -> PeakSeasonRule | None:
        rule = self.rules.get(rule_id)
        return deepcopy(rule) if rule else None

    async def list_active(self) -> Sequence[PeakSeasonRule]:
        return [rule for rule in await self.find_all() if rule.is_active]

    async def find_all(self) -> Sequence[PeakSeasonRule]:
        ordered = sorted(self.rules.values(), key=lambda rule: rule.sort_key)
        return [deepcopy(rule) for rule in ordered]

    async def create(self, rule: PeakSeasonRule) -> PeakSeasonRule:
        rule = deepcopy(rule)
        rule.id = self._next_id
        self._next_id += 1
        self.rules[rule.id] = rule
        return deepcopy(rule)

    async def update(self, rule: PeakSeasonRule) -> PeakSeasonRule:
        if rule.id not in self.rules:
            raise PeakSeasonRuleNotFoundError(rule.id)
        self.rules[rule.id] = deepcopy(rule)
        return deepcopy(rule)
