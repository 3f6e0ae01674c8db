from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import iso
from ..common.http import json_body, message
from ..common.session import admin_required, current_principal, login_required
from ..container import Container
from .model import EmployeeView


def _row(view: EmployeeView) -> dict:
    e = view.employee
    out = {
        "id": e.employee_id,
        "accountId": e.account_id,
        "departmentId": e.department_id,
        "position": e.position,
        "hireDate": iso(e.hire_date),
        "status": e.status,
        "created": iso(e.created),
        "updated": iso(e.updated),
        "account": None,
        "department": None,
    }
    if view.account:
        out["account"] = {
            "email": view.account.email,
            "title": view.account.title,
            "firstName": view.account.first_name,
            "lastName": view.account.last_name,
            "fullName": view.account.full_name,
        }
    if view.department:
        out["department"] = {"id": view.department.department_id, "name": view.department.name}
    return out


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.get("/employees", endpoint="employees_list")
    @login_required
    def employees_list():
        return jsonify([_row(v) for v in service.list_employees()])

    @app.get("/employees/<int:employee_id>", endpoint="employees_get")
    @login_required
    def employees_get(employee_id: int):
        return jsonify(_row(service.get_employee(employee_id)))

    @app.post("/employees", endpoint="employees_create")
    @admin_required
    def employees_create():
        data = json_body()
        employee_id = service.create_employee(
            current_principal(),
            account_id=data.get("accountId"),
            department_id=data.get("departmentId"),
            position=data.get("position"),
            hire_date=data.get("hireDate"),
            status=data.get("status") or "Active",
        )
        return message("Employee created", 201, id=employee_id)

    @app.put("/employees/<int:employee_id>", endpoint="employees_update")
    @admin_required
    def employees_update(employee_id: int):
        service.update_employee(current_principal(), employee_id, json_body())
        return message("Employee updated")

    @app.delete("/employees/<int:employee_id>", endpoint="employees_delete")
    @admin_required
    def employees_delete(employee_id: int):
        service.delete_employee(current_principal(), employee_id)
        return message("Employee deleted")

    @app.post("/employees/<int:employee_id>/transfer", endpoint="employees_transfer")
    @admin_required
    def employees_transfer(employee_id: int):
        data = json_body()
        service.transfer_department(current_principal(), employee_id, data.get("departmentId"))
        return message("Department transferred")
