from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import PersonCategory
from .model import Person


class PersonDirectory(Protocol):
    def get(self, category: PersonCategory, person_id: int) -> Optional[Person]:
        raise NotImplementedError
