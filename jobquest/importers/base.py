from abc import ABC, abstractmethod
from typing import Any


class JobImporterBase(ABC):
    @abstractmethod
    def parse(self, text: str) -> list[dict[str, Any]]:
        """Turn raw collaborator output into partial job records for ``add_job``."""
