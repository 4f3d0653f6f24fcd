# slide_restore/domain/services/i_key_storage_service.py
from abc import ABC, abstractmethod
from typing import Optional

from slide_restore.domain.common.result import Result


class IKeyStorage(ABC):
    """Persistent storage for the generative model API key."""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the stored key, or None."""
        pass

    @abstractmethod
    def set(self, key: str) -> Result[bool]:
        """Validate and persist a key."""
        pass

    @abstractmethod
    def clear(self) -> Result[bool]:
        """Forget the stored key."""
        pass

    @abstractmethod
    def has_key(self) -> bool:
        """Whether a usable key is available."""
        pass
