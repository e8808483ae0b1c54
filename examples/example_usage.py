"""Example: drive the exit workflow through the service layer (no Flask).

Controllers are a thin layer, the business rules live in the services.
"""

import importlib
from datetime import date, timedelta

from config import get_settings_module

from src.hr_exit.hr_exit.container import build_container
from src.hr_exit.hr_exit.core.enums import ExitStep, Role
from src.hr_exit.hr_exit.resignations.progress import build_progress


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.resignation_service

    # Demo users from database/seed.sql: 1 admin, 2 hr, 3 employee.
    r = service.submit(
        current_role=Role.EMPLOYEE,
        user_id=3,
        resignation_date=date.today() + timedelta(days=30),
        reason="Relocation",
        assets=["LAPTOP-0042"],
    )
    service.approve(current_role=Role.HR, actor_id=2, resignation_id=r.resignation_id)
    r = service.update_exit_step(
        current_role=Role.HR,
        actor_id=2,
        resignation_id=r.resignation_id,
        step=ExitStep.CLEARANCES,
        payload={"department": "design", "status": "approved"},
    )

    for s in build_progress(r).steps:
        print(f"{s.step:20} {s.progress.value}")


if __name__ == "__main__":
    main()
