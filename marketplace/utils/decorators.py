import hmac
from functools import wraps
from typing import Optional

from flask import current_app, g, jsonify, request, session

from ..models.user import Actor
from .constants import ProviderStatus, Role


def current_actor() -> Optional[Actor]:
    """
    The authenticated caller, read from the session written at sign-in.
    Returns None for anonymous requests or an unknown role.
    """
    uid = session.get("uid")
    if not uid:
        return None
    try:
        role = Role(session.get("role"))
        status = session.get("provider_status")
        return Actor(uid, role, ProviderStatus(status) if status else None)
    except ValueError:
        return None


def _deny(message: str, code: int):
    return jsonify({"error": message, "kind": "unauthorized" if code == 401 else "forbidden"}), code


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return _deny("Unauthorized", 401)
        g.actor = actor
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            actor = current_actor()
            if actor is None:
                return _deny("Unauthorized", 401)
            if actor.role not in roles:
                return _deny("Insufficient permission", 403)
            g.actor = actor
            return fn(*args, **kwargs)

        return wrapper

    return deco


def approved_provider_required(fn):
    """Approved providers pass; admins have access to every provider route."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return _deny("Unauthorized", 401)
        if actor.role == Role.ADMIN:
            g.actor = actor
            return fn(*args, **kwargs)
        if actor.role != Role.PROVIDER:
            return _deny("Not a provider", 403)
        if actor.provider_status != ProviderStatus.APPROVED:
            return _deny("Provider not approved", 403)
        g.actor = actor
        return fn(*args, **kwargs)

    return wrapper


def cron_or_admin_required(fn):
    """Scheduled jobs authenticate with the X-Cron-Secret header; admins may trigger by hand."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        secret = current_app.config.get("CRON_SECRET") or ""
        header = request.headers.get("X-Cron-Secret") or ""
        if secret and hmac.compare_digest(header, secret):
            g.actor = None
            return fn(*args, **kwargs)
        actor = current_actor()
        if actor is None or actor.role != Role.ADMIN:
            return _deny("Unauthorized", 401)
        g.actor = actor
        return fn(*args, **kwargs)

    return wrapper
