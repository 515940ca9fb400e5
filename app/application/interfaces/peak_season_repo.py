from typing import Sequence

from app.domain.entities.peak_season_rule import PeakSeasonRule


class PeakSeasonRepo:
    async def get(self, rule_id: int) -> PeakSeasonRule | None:
        raise NotImplementedError

    async def list_active(self) -> Sequence[PeakSeasonRule]:
        """Active rules ordered by start_date, then id."""
        raise NotImplementedError

    async def find_all(self) -> Sequence[PeakSeasonRule]:
        raise NotImplementedError

    async def create(self, rule: PeakSeasonRule) -> PeakSeasonRule:
        raise NotImplementedError

    async def update(self, rule: PeakSeasonRule) -> PeakSeasonRule:
        raise NotImplementedError
