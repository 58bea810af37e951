# oauth_clients/adapters/outbound/security/id_generator.py

import uuid

from oauth_clients.application.ports.outbound import IIdGenerator


class UUIDGenerator(IIdGenerator):
    """Random (version 4) UUID client identifiers."""

    def new_id(self) -> str:
        return str(uuid.uuid4())
