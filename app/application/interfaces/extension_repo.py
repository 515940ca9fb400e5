from typing import Sequence

from app.domain.entities.extension import Extension, ExtensionStatus


class ExtensionRepo:
    async def get(self, extension_id: int) -> Extension | None:
        raise NotImplementedError

    async def find_pending(self, booking_id: int) -> Extension | None:
        raise NotImplementedError

    async def find_all(
        self,
        booking_id: int | None = None,
        status: ExtensionStatus | None = None,
    ) -> Sequence[Extension]:
        raise NotImplementedError

    async def create(self, extension: Extension) -> Extension:
        """Raises PendingExtensionExistsError if the booking already has a pending extension."""
        raise NotImplementedError

    async def update(self, extension: Extension) -> Extension:
        raise NotImplementedError
