from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .access.policy import AccessPolicy
from .accounts.memory_account_repository import MemoryAccountRepository
from .accounts.mysql_account_repository import MySQLAccountRepository
from .accounts.repository import AccountRepository
from .accounts.service import AccountService
from .core.constants import RESET_TOKEN_TTL_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .database.memory import MemoryStore
from .departments.memory_department_repository import MemoryDepartmentRepository
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentService
from .employees.memory_employee_repository import MemoryEmployeeRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .requests.memory_request_repository import MemoryRequestRepository
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .workflows.memory_workflow_repository import MemoryWorkflowRepository
from .workflows.mysql_workflow_repository import MySQLWorkflowRepository
from .workflows.repository import WorkflowRepository
from .workflows.service import WorkflowService

STORE_BACKENDS = ("mysql", "memory")


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    store: Optional[MemoryStore]

    accounts_repo: AccountRepository
    departments_repo: DepartmentRepository
    employees_repo: EmployeeRepository
    requests_repo: RequestRepository
    workflows_repo: WorkflowRepository

    policy: AccessPolicy

    account_service: AccountService
    department_service: DepartmentService
    employee_service: EmployeeService
    request_service: RequestService
    workflow_service: WorkflowService


def build_container(
    *,
    db_config: Optional[dict] = None,
    store_backend: str = "mysql",
    store: Optional[MemoryStore] = None,
    auto_record_workflows: bool = False,
    account_delete_policy: str = "block",
    reset_token_ttl_hours: int = RESET_TOKEN_TTL_HOURS,
) -> Container:
    if store_backend not in STORE_BACKENDS:
        raise ValueError(f"STORE_BACKEND must be one of {STORE_BACKENDS}, got {store_backend!r}")

    conn: Optional[DatabaseConnection] = None
    if store_backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql store backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        store = None
        accounts_repo = MySQLAccountRepository(conn)
        departments_repo = MySQLDepartmentRepository(conn)
        employees_repo = MySQLEmployeeRepository(conn)
        requests_repo = MySQLRequestRepository(conn)
        workflows_repo = MySQLWorkflowRepository(conn)
    else:
        store = store or MemoryStore()
        accounts_repo = MemoryAccountRepository(store)
        departments_repo = MemoryDepartmentRepository(store)
        employees_repo = MemoryEmployeeRepository(store)
        requests_repo = MemoryRequestRepository(store)
        workflows_repo = MemoryWorkflowRepository(store)

    policy = AccessPolicy(employees_repo)

    workflow_service = WorkflowService(workflows_repo, employees_repo, accounts_repo, policy)
    recorder = workflow_service if auto_record_workflows else None

    account_service = AccountService(
        accounts_repo,
        employees_repo,
        policy,
        delete_policy=account_delete_policy,
        reset_token_ttl_hours=reset_token_ttl_hours,
    )
    department_service = DepartmentService(departments_repo, policy)
    employee_service = EmployeeService(employees_repo, accounts_repo, departments_repo, policy, workflows=recorder)
    request_service = RequestService(requests_repo, employees_repo, policy, workflows=recorder)

    return Container(
        conn=conn,
        store=store,
        accounts_repo=accounts_repo,
        departments_repo=departments_repo,
        employees_repo=employees_repo,
        requests_repo=requests_repo,
        workflows_repo=workflows_repo,
        policy=policy,
        account_service=account_service,
        department_service=department_service,
        employee_service=employee_service,
        request_service=request_service,
        workflow_service=workflow_service,
    )
