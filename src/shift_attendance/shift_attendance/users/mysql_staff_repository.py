from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import ConnectionFactory
from ..database.mysql_base import db_cursor
from .model import StaffMember
from .repository import StaffRepository


def _row_to_staff(row: dict) -> StaffMember:
    return StaffMember(
        staff_id=int(row["staff_id"]),
        full_name=row["full_name"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: ConnectionFactory):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[StaffMember]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                SELECT staff_id, full_name, role, is_active
                FROM staff
                WHERE staff_id=%s
                """,
                (int(staff_id),),
            )
            row = cur.fetchone()
            return _row_to_staff(row) if row else None

    def list_by_role(self, role: Role, *, limit: Optional[int] = None) -> Sequence[StaffMember]:
        sql = """
            SELECT staff_id, full_name, role, is_active
            FROM staff
            WHERE role=%s AND is_active=1
            ORDER BY staff_id ASC
        """
        params: list[object] = [role.value]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as cur:
            cur.execute(sql, tuple(params))
            return [_row_to_staff(r) for r in cur.fetchall()]
