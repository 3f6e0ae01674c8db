from __future__ import annotations

from flask import Flask, current_app, jsonify, session

from ..common.datetime_utils import iso
from ..common.http import json_body, message
from ..common.session import admin_required, current_principal, login_required
from ..container import Container
from .model import Account


def _row(acc: Account) -> dict:
    return {
        "id": acc.account_id,
        "title": acc.title,
        "firstName": acc.first_name,
        "lastName": acc.last_name,
        "email": acc.email,
        "role": acc.role.value,
        "status": acc.status.value,
        "isVerified": acc.is_verified,
        "created": iso(acc.created),
        "updated": iso(acc.updated),
        "lastLogin": iso(acc.last_login),
    }


def _expose_tokens() -> bool:
    # No mail delivery: tokens are only handed back to callers in debug/testing.
    return bool(current_app.config.get("DEBUG") or current_app.config.get("TESTING"))


def register(app: Flask, container: Container) -> None:
    service = container.account_service

    @app.post("/accounts/authenticate", endpoint="accounts_authenticate")
    def accounts_authenticate():
        data = json_body()
        acc = service.authenticate(data.get("email"), data.get("password"))
        session.clear()
        session["account_id"] = acc.account_id
        session["role"] = acc.role.value
        session["name"] = acc.full_name
        return jsonify(_row(acc))

    @app.post("/accounts/logout", endpoint="accounts_logout")
    def accounts_logout():
        session.clear()
        return message("Logged out")

    @app.post("/accounts/register", endpoint="accounts_register")
    def accounts_register():
        data = json_body()
        reg = service.register(
            title=data.get("title"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            email=data.get("email"),
            password=data.get("password"),
            confirm_password=data.get("confirmPassword"),
        )
        extra = {"id": reg.account_id}
        if reg.verification_token and _expose_tokens():
            extra["verificationToken"] = reg.verification_token
        return message("Registration successful, please check your email for verification instructions", 201, **extra)

    @app.post("/accounts/verify-email", endpoint="accounts_verify_email")
    def accounts_verify_email():
        service.verify_email(json_body().get("token"))
        return message("Verification successful, you can now login")

    @app.post("/accounts/forgot-password", endpoint="accounts_forgot_password")
    def accounts_forgot_password():
        token = service.forgot_password(json_body().get("email"))
        extra = {"resetToken": token} if token and _expose_tokens() else {}
        return message("Please check your email for password reset instructions", **extra)

    @app.post("/accounts/validate-reset-token", endpoint="accounts_validate_reset_token")
    def accounts_validate_reset_token():
        service.validate_reset_token(json_body().get("token"))
        return message("Token is valid")

    @app.post("/accounts/reset-password", endpoint="accounts_reset_password")
    def accounts_reset_password():
        data = json_body()
        service.reset_password(data.get("token"), data.get("password"), data.get("confirmPassword"))
        return message("Password reset successful, you can now login")

    @app.post("/accounts/email-exists", endpoint="accounts_email_exists")
    def accounts_email_exists():
        return jsonify({"exists": service.email_exists(json_body().get("email"))})

    @app.post("/accounts/is-email-verified", endpoint="accounts_is_email_verified")
    def accounts_is_email_verified():
        return jsonify({"isVerified": service.is_email_verified(json_body().get("email"))})

    @app.get("/accounts", endpoint="accounts_list")
    @admin_required
    def accounts_list():
        return jsonify([_row(a) for a in service.list_accounts(current_principal())])

    @app.get("/accounts/<int:account_id>", endpoint="accounts_get")
    @login_required
    def accounts_get(account_id: int):
        return jsonify(_row(service.get_account(current_principal(), account_id)))

    @app.post("/accounts", endpoint="accounts_create")
    @admin_required
    def accounts_create():
        data = json_body()
        account_id = service.create_account(
            current_principal(),
            title=data.get("title"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            email=data.get("email"),
            password=data.get("password"),
            confirm_password=data.get("confirmPassword"),
            role=data.get("role") or "User",
            status=data.get("status") or "Active",
        )
        return message("Account created", 201, id=account_id)

    @app.put("/accounts/<int:account_id>", endpoint="accounts_update")
    @login_required
    def accounts_update(account_id: int):
        principal = current_principal()
        acc = service.update_account(principal, account_id, json_body())
        if acc.account_id == principal.account_id:
            session["role"] = acc.role.value
            session["name"] = acc.full_name
        return message("Account updated", account=_row(acc))

    @app.delete("/accounts/<int:account_id>", endpoint="accounts_delete")
    @login_required
    def accounts_delete(account_id: int):
        principal = current_principal()
        service.delete_account(principal, account_id)
        if account_id == principal.account_id:
            session.clear()
        return message("Account deleted")
