from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class StaffMember:
    """Thực thể miền (domain): Nhân viên (bếp/phục vụ).

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    staff_id: int
    full_name: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class Actor:
    """Authenticated caller handed in by the outer layer; trusted as-is."""

    staff_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
