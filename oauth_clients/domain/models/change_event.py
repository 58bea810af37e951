# oauth_clients/domain/models/change_event.py

from dataclasses import dataclass
from typing import Optional

from oauth_clients.domain.models.client_domain_model import ClientRecord


@dataclass(frozen=True)
class ChangeEvent:
    """
    A single mutation reported by the store's change subscription.

    Inserts carry only new_value, deletes only old_value and updates both.
    """
    old_value: Optional[ClientRecord] = None
    new_value: Optional[ClientRecord] = None

    @property
    def is_empty(self) -> bool:
        return self.old_value is None and self.new_value is None
