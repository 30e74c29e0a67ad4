from __future__ import annotations

from flask import Flask, g

from ..common.datetime_utils import iso_or_none
from ..common.http import json_body, login_required, ok, verified_required
from ..container import Container
from .serializers import tokens_to_dict, user_to_dict


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    profiles = container.profile_service

    # ---- auth ----

    @app.route("/api/auth/signup", methods=["POST"], endpoint="auth_signup")
    def signup():
        body = json_body()
        result = auth.signup(
            name=body.get("name"),
            email=body.get("email"),
            college=body.get("college"),
            password=body.get("password"),
        )
        message = (
            "Verification email sent. Please check your inbox to verify your email."
            if result.email_sent
            else "Account created. Email verification is temporarily unavailable, please request a new link later."
        )
        return ok(
            {"email": result.email, "tokenExpiry": iso_or_none(result.token_expiry)},
            message=message,
            status=201,
        )

    @app.route("/api/auth/verify-email", methods=["POST"], endpoint="auth_verify_email")
    def verify_email():
        result = auth.verify_email(json_body().get("token"))
        return ok(
            {"user": user_to_dict(result.user), **tokens_to_dict(result.tokens)},
            message="Email verified successfully. You can now log in.",
        )

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        result = auth.login(email=body.get("email"), password=body.get("password"))
        return ok({"user": user_to_dict(result.user), **tokens_to_dict(result.tokens)}, message="Login successful")

    @app.route("/api/auth/google", methods=["POST"], endpoint="auth_google")
    def google():
        result = auth.google_auth(json_body().get("token"))
        return ok(
            {"user": user_to_dict(result.user), **tokens_to_dict(result.tokens)},
            message="Google authentication successful",
        )

    @app.route("/api/auth/refresh", methods=["POST"], endpoint="auth_refresh")
    def refresh():
        pair = auth.refresh(json_body().get("refreshToken"))
        return ok(tokens_to_dict(pair), message="Token refreshed successfully")

    @app.route("/api/auth/resend-verification", methods=["POST"], endpoint="auth_resend_verification")
    def resend_verification():
        result = auth.resend_verification(json_body().get("email"))
        return ok(
            {"email": result.email, "tokenExpiry": iso_or_none(result.token_expiry)},
            message="Verification email resent successfully",
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @login_required
    def logout():
        auth.logout(g.current_user)
        return ok(message="Logout successful")

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        return ok({"user": user_to_dict(g.current_user)})

    # ---- profile ----

    @app.route("/api/profile", methods=["GET"], endpoint="profile_get")
    @login_required
    def get_profile():
        return ok({"user": user_to_dict(profiles.get(g.current_user.user_id))})

    @app.route("/api/profile", methods=["PUT"], endpoint="profile_update")
    @login_required
    def update_profile():
        user = profiles.update(g.current_user.user_id, json_body())
        return ok({"user": user_to_dict(user)}, message="Profile updated successfully")

    @app.route("/api/profile/password", methods=["PUT"], endpoint="profile_password")
    @verified_required
    def change_password():
        body = json_body()
        profiles.change_password(
            g.current_user.user_id,
            current_password=body.get("currentPassword"),
            new_password=body.get("newPassword"),
        )
        return ok(message="Password changed successfully")

    @app.route("/api/profile", methods=["DELETE"], endpoint="profile_deactivate")
    @login_required
    def deactivate():
        profiles.deactivate(g.current_user.user_id)
        return ok(message="Account deactivated successfully")
