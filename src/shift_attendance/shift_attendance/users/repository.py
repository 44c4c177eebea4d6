from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import StaffMember


class StaffRepository(Protocol):
    """Giao diện repository cho nhân viên.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def get_by_id(self, staff_id: int) -> Optional[StaffMember]:
        raise NotImplementedError

    def list_by_role(self, role: Role, *, limit: Optional[int] = None) -> Sequence[StaffMember]:
        """Active staff of ``role`` ordered by id, at most ``limit`` of them."""

        raise NotImplementedError
