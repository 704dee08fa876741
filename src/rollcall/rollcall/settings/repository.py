from __future__ import annotations

from typing import Mapping, Optional, Protocol


class SettingsRepository(Protocol):
    def get_all(self) -> dict[str, Optional[str]]:
        raise NotImplementedError

    def save(self, values: Mapping[str, str]) -> None:
        """Upsert every key in one transaction."""

        raise NotImplementedError
