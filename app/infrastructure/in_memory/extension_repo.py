from copy import deepcopy
from typing import Sequence

from app.application.interfaces.extension_repo import ExtensionRepo
from app.domain.entities.extension import Extension, ExtensionStatus
from app.domain.errors import ExtensionNotFoundError, PendingExtensionExistsError


class InMemoryExtensionRepo(ExtensionRepo):
    def __init__(self) -> None:
        self.extensions: dict[int, Extension] = {}
        self._next_id = 1

    async def get(self, extension_id: int) -> Extension | None:
        extension = self.extensions.get(extension_id)
        return deepcopy(extension) if extension else None

    async def find_pending(self, booking_id: int) -> Extension | None:
        for extension in self.extensions.values():
            if extension.booking_id == booking_id and extension.is_pending:
                return deepcopy(extension)
        return None

    async def find_all(
        self,
        booking_id: int | None = None,
        status: ExtensionStatus | None = None,
    ) -> Sequence[Extension]:
        return [
            deepcopy(extension)
            for extension in self.extensions.values()
            if (booking_id is None or extension.booking_id == booking_id)
            and (status is None or extension.status == status)
        ]

    async def create(self, extension: Extension) -> Extension:
        pending = await self.find_pending(extension.booking_id)
        if pending:
            raise PendingExtensionExistsError(extension.booking_id, pending.id)
        extension = deepcopy(extension)
        extension.id = self._next_id
        self._next_id += 1
        self.extensions[extension.id] = extension
        return deepcopy(extension)

    async def update(self, extension: Extension) -> Extension:
        if extension.id not in self.extensions:
            raise ExtensionNotFoundError(extension.id)
        self.extensions[extension.id] = deepcopy(extension)
        return deepcopy(extension)
