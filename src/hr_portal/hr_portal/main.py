from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.security import generate_password_hash

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.enums import AccountStatus, Role
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_admin, list_tables
from .departments.controller import register as register_departments
from .employees.controller import register as register_employees
from .requests.controller import register as register_requests
from .workflows.controller import register as register_workflows

log = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[3]

DEMO_DEPARTMENTS = (
    ("Engineering", "Software and infrastructure"),
    ("Human Resources", "People operations"),
    ("Finance", "Accounting and payroll"),
)


def _settings(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    module = importlib.import_module(get_settings_module())
    values = {name: getattr(module, name) for name in dir(module) if name.isupper()}
    values.update(overrides or {})
    return values


def _seed_memory(container: Container) -> None:
    """Demo data for the memory backend, mirroring database/seed.sql."""
    for name, description in DEMO_DEPARTMENTS:
        container.departments_repo.create(name=name, description=description)
    if not container.accounts_repo.get_by_email("admin@example.com"):
        container.accounts_repo.create(
            title="Mr",
            first_name="Admin",
            last_name="User",
            email="admin@example.com",
            password_hash=generate_password_hash("admin123"),
            role=Role.ADMIN,
            status=AccountStatus.ACTIVE,
            is_verified=True,
        )


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = _settings(overrides)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    logging.basicConfig(
        level=settings.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store_backend = settings.get("STORE_BACKEND", "mysql")
    db_config = settings.get("DB_CONFIG")
    auto_init_db = bool(settings.get("AUTO_INIT_DB", False))
    auto_seed_db = bool(settings.get("AUTO_SEED_DB", False))

    if store_backend == "mysql":
        log.info(
            "Using MySQL store %s@%s:%s/%s",
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if auto_init_db:
            apply_schema(db_config, schema_path=ROOT / "database" / "schema.sql")
            log.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if auto_seed_db:
            apply_seed_sql(db_config, seed_path=ROOT / "database" / "seed.sql")
            ensure_demo_admin(db_config)
            log.info("Demo seed ready")

    container = build_container(
        db_config=db_config,
        store_backend=store_backend,
        auto_record_workflows=bool(settings.get("AUTO_RECORD_WORKFLOWS", False)),
        account_delete_policy=settings.get("ACCOUNT_DELETE_POLICY", "block"),
        reset_token_ttl_hours=int(settings.get("RESET_TOKEN_TTL_HOURS", 24)),
    )
    if store_backend == "memory" and auto_seed_db:
        _seed_memory(container)

    app.extensions["hr_portal"] = container
    register_error_handlers(app)

    register_accounts(app, container)
    register_departments(app, container)
    register_employees(app, container)
    register_requests(app, container)
    register_workflows(app, container)

    return app
