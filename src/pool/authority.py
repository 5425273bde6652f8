"""Authority — владелец пула как явное значение.

Привилегированные операции (pause / resume / emergency_withdraw /
transfer_authority) начинаются с require(caller).
"""

import logging
from dataclasses import dataclass

from src.core.domain.address import validate_address
from src.core.domain.errors import Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Authority:
    """Единственный владелец пула."""

    owner: str

    def __post_init__(self):
        validate_address(self.owner, "owner")

    def is_owner(self, caller: str) -> bool:
        return caller == self.owner

    def require(self, caller: str, operation: str) -> None:
        """
        Raises:
            Unauthorized: если caller не владелец
        """
        if not self.is_owner(caller):
            logger.warning("Unauthorized %s attempt by %s", operation, caller)
            raise Unauthorized(f"{operation} is restricted to the pool authority")

    def transferred_to(self, new_owner: str) -> "Authority":
        return Authority(owner=validate_address(new_owner, "new_owner"))
