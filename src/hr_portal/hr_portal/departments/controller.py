from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import iso
from ..common.http import json_body, message
from ..common.session import admin_required, current_principal, login_required
from ..container import Container
from .model import DepartmentSummary


def _row(summary: DepartmentSummary) -> dict:
    d = summary.department
    return {
        "id": d.department_id,
        "name": d.name,
        "description": d.description,
        "employeeCount": summary.employee_count,
        "created": iso(d.created),
        "updated": iso(d.updated),
    }


def register(app: Flask, container: Container) -> None:
    service = container.department_service

    @app.get("/departments", endpoint="departments_list")
    @login_required
    def departments_list():
        return jsonify([_row(s) for s in service.list_departments()])

    @app.get("/departments/<int:department_id>", endpoint="departments_get")
    @login_required
    def departments_get(department_id: int):
        return jsonify(_row(service.get_department(department_id)))

    @app.post("/departments", endpoint="departments_create")
    @admin_required
    def departments_create():
        data = json_body()
        department_id = service.create_department(
            current_principal(), name=data.get("name"), description=data.get("description")
        )
        return message("Department created", 201, id=department_id)

    @app.put("/departments/<int:department_id>", endpoint="departments_update")
    @admin_required
    def departments_update(department_id: int):
        service.update_department(current_principal(), department_id, json_body())
        return message("Department updated")

    @app.delete("/departments/<int:department_id>", endpoint="departments_delete")
    @admin_required
    def departments_delete(department_id: int):
        service.delete_department(current_principal(), department_id)
        return message("Department deleted")
