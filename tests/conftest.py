from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from hr_portal.access.policy import Principal
from hr_portal.container import Container, build_container
from hr_portal.core.enums import AccountStatus, Role


@dataclass
class Cast:
    admin: Principal
    alice: Principal
    bob: Principal
    outsider: Principal
    alice_employee_id: int
    bob_employee_id: int
    engineering_id: int
    finance_id: int


def _account(container: Container, first: str, last: str, email: str, role: Role = Role.USER) -> int:
    return container.accounts_repo.create(
        title=None,
        first_name=first,
        last_name=last,
        email=email,
        password_hash=generate_password_hash("secret123"),
        role=role,
        status=AccountStatus.ACTIVE,
        is_verified=True,
    )


@pytest.fixture()
def container() -> Container:
    return build_container(store_backend="memory", auto_record_workflows=True)


@pytest.fixture()
def cast(container: Container) -> Cast:
    """Admin plus two employees (Alice, Bob) and an account with no employee record."""
    admin = Principal(_account(container, "Ada", "Admin", "admin@example.com", Role.ADMIN), Role.ADMIN)
    alice = Principal(_account(container, "Alice", "Nguyen", "alice@example.com"), Role.USER)
    bob = Principal(_account(container, "Bob", "Tran", "bob@example.com"), Role.USER)
    outsider = Principal(_account(container, "Olga", "Outsider", "olga@example.com"), Role.USER)

    engineering_id = container.department_service.create_department(admin, name="Engineering")
    finance_id = container.department_service.create_department(admin, name="Finance")

    employees = container.employee_service
    alice_employee_id = employees.create_employee(
        admin,
        account_id=alice.account_id,
        department_id=engineering_id,
        position="Developer",
        hire_date=date(2024, 1, 15),
        status="Active",
    )
    bob_employee_id = employees.create_employee(
        admin,
        account_id=bob.account_id,
        department_id=engineering_id,
        position="Tester",
        hire_date=date(2024, 3, 1),
        status="Active",
    )
    return Cast(
        admin=admin,
        alice=alice,
        bob=bob,
        outsider=outsider,
        alice_employee_id=alice_employee_id,
        bob_employee_id=bob_employee_id,
        engineering_id=engineering_id,
        finance_id=finance_id,
    )
