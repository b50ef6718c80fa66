from functools import wraps
from flask import current_app, g, request

from library_api.errors import error_response
from library_api.utils.auth import authorize


def guarded(operation):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            identity, err = authorize(
                operation,
                request.headers,
                role_header=current_app.config["ROLE_HEADER"],
                user_id_header=current_app.config["USER_ID_HEADER"],
            )
            if err:
                current_app.logger.info(f"[auth] {operation} rejected: {err.kind.value} ({err.message})")
                return error_response(err)
            g.identity = identity
            return fn(*args, **kwargs)
        return wrapper
    return decorator
