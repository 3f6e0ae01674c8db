from __future__ import annotations

from typing import Any

from flask import Flask, jsonify

from ..common.datetime_utils import iso
from ..common.http import json_body, message
from ..common.session import admin_required, current_principal, login_required
from ..container import Container
from .model import Workflow


def _row(wf: Workflow) -> dict:
    return {
        "id": wf.workflow_id,
        "employeeId": wf.employee_id,
        "type": wf.type,
        "details": wf.details,
        "status": wf.status.value,
        "comments": wf.comments,
        "handledBy": wf.handled_by,
        "created": iso(wf.created),
        "updated": iso(wf.updated),
    }


def _department_name(value: Any) -> Any:
    # accepts either a plain name or a department object
    return value.get("name") if isinstance(value, dict) else value


def register(app: Flask, container: Container) -> None:
    service = container.workflow_service

    @app.get("/workflows/employee/<int:employee_id>", endpoint="workflows_by_employee")
    @login_required
    def workflows_by_employee(employee_id: int):
        return jsonify([_row(w) for w in service.list_by_employee(current_principal(), employee_id)])

    @app.get("/workflows/<int:workflow_id>", endpoint="workflows_get")
    @login_required
    def workflows_get(workflow_id: int):
        return jsonify(_row(service.get_workflow(current_principal(), workflow_id)))

    @app.post("/workflows", endpoint="workflows_create")
    @admin_required
    def workflows_create():
        data = json_body()
        workflow_id = service.create(
            current_principal(),
            employee_id=data.get("employeeId"),
            type=data.get("type"),
            details=data.get("details"),
            status=data.get("status"),
        )
        return message("Workflow created", 201, id=workflow_id)

    @app.put("/workflows/<int:workflow_id>", endpoint="workflows_update")
    @admin_required
    def workflows_update(workflow_id: int):
        wf = service.update(current_principal(), workflow_id, json_body())
        return message("Workflow updated", workflow=_row(wf))

    @app.delete("/workflows/<int:workflow_id>", endpoint="workflows_delete")
    @admin_required
    def workflows_delete(workflow_id: int):
        service.delete(current_principal(), workflow_id)
        return message("Workflow deleted")

    @app.post("/workflows/onboarding", endpoint="workflows_onboarding")
    @admin_required
    def workflows_onboarding():
        workflow_id = service.onboarding(json_body().get("employeeId"))
        return message("Onboarding workflow created", 201, id=workflow_id)

    @app.post("/workflows/transfer", endpoint="workflows_transfer")
    @admin_required
    def workflows_transfer():
        data = json_body()
        workflow_id = service.department_transfer(
            data.get("employeeId"),
            _department_name(data.get("oldDepartment")),
            _department_name(data.get("newDepartment")),
        )
        return message("Transfer workflow created", 201, id=workflow_id)

    @app.post("/workflows/leave", endpoint="workflows_leave")
    @admin_required
    def workflows_leave():
        data = json_body()
        workflow_id = service.leave_requested(data.get("employeeId"), data.get("startDate"), data.get("endDate"))
        return message("Leave workflow created", 201, id=workflow_id)

    @app.post("/workflows/resources", endpoint="workflows_resources")
    @admin_required
    def workflows_resources():
        data = json_body()
        workflow_id = service.resources_requested(data.get("employeeId"), data.get("items"))
        return message("Resource workflow created", 201, id=workflow_id)
