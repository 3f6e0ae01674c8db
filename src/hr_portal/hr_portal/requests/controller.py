from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import iso
from ..common.http import json_body, message
from ..common.session import current_principal, login_required
from ..container import Container
from .model import Request


def _row(req: Request) -> dict:
    return {
        "id": req.request_id,
        "employeeId": req.employee_id,
        "type": req.type,
        "status": req.status.value,
        "requestDate": iso(req.request_date),
        "created": iso(req.created),
        "updated": iso(req.updated),
        "requestItems": [{"id": i.item_id, "name": i.name, "quantity": i.quantity} for i in req.items],
        "requestLeave": (
            {"id": req.leave.leave_id, "startDate": iso(req.leave.start_date), "endDate": iso(req.leave.end_date)}
            if req.leave
            else None
        ),
    }


def register(app: Flask, container: Container) -> None:
    service = container.request_service

    @app.get("/requests", endpoint="requests_list")
    @login_required
    def requests_list():
        return jsonify([_row(r) for r in service.list_all(current_principal())])

    @app.get("/requests/<int:request_id>", endpoint="requests_get")
    @login_required
    def requests_get(request_id: int):
        return jsonify(_row(service.get_by_id(current_principal(), request_id)))

    @app.get("/requests/employee/<int:employee_id>", endpoint="requests_by_employee")
    @login_required
    def requests_by_employee(employee_id: int):
        return jsonify([_row(r) for r in service.list_by_employee(current_principal(), employee_id)])

    @app.post("/requests", endpoint="requests_create")
    @login_required
    def requests_create():
        data = json_body()
        request_id = service.create(
            current_principal(),
            employee_id=data.get("employeeId"),
            type=data.get("type"),
            status=data.get("status"),
            request_date=data.get("requestDate"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            items=data.get("items"),
        )
        return message("Request created", 201, id=request_id)

    @app.put("/requests/<int:request_id>", endpoint="requests_update")
    @login_required
    def requests_update(request_id: int):
        req = service.update(current_principal(), request_id, json_body())
        return message("Request updated", request=_row(req))

    @app.delete("/requests/<int:request_id>", endpoint="requests_delete")
    @login_required
    def requests_delete(request_id: int):
        service.delete(current_principal(), request_id)
        return message("Request deleted")
