from __future__ import annotations

from dataclasses import dataclass

from .database.connection import DBConfig, DatabaseConnection
from .resignations.factory import ExitStepFactory
from .resignations.mysql_resignation_repository import MySQLResignationRepository
from .resignations.repository import ResignationRepository
from .resignations.service import ResignationService
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    resignations_repo: ResignationRepository

    resignation_service: ResignationService


def build_container(*, db_config: dict, require_approval_for_steps: bool = False) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    resignations_repo = MySQLResignationRepository(conn)

    resignation_service = ResignationService(
        resignations_repo,
        employees_repo,
        step_factory=ExitStepFactory(),
        require_approval_for_steps=require_approval_for_steps,
    )

    return Container(
        employees_repo=employees_repo,
        resignations_repo=resignations_repo,
        resignation_service=resignation_service,
    )
