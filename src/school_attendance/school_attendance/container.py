from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.query_service import AttendanceQueryService
from .attendance.service import AttendanceRecordingService
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import UnitOfWorkFactory, mysql_uow_factory


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    uow_factory: UnitOfWorkFactory

    recording_service: AttendanceRecordingService
    query_service: AttendanceQueryService


def build_services(*, uow_factory: UnitOfWorkFactory, conn: Optional[DatabaseConnection] = None) -> Container:
    return Container(
        conn=conn,
        uow_factory=uow_factory,
        recording_service=AttendanceRecordingService(uow_factory),
        query_service=AttendanceQueryService(uow_factory),
    )


def build_container(*, db_config: dict) -> Container:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection.get_instance(config)
    return build_services(uow_factory=mysql_uow_factory(conn), conn=conn)
