# library_api/utils/auth.py
from __future__ import annotations

from typing import NamedTuple

from library_api.errors import AppError, ErrorKind
from library_api.utils.validators import MAX_ID, is_id_text

VALID_ROLES = ("admin", "user")


class Identity(NamedTuple):
    role: str | None
    user_id: int | None


class Policy(NamedTuple):
    roles: tuple
    requires_user_id: bool = False


# operasyon -> izinli roller
POLICIES = {
    "books.create": Policy(roles=("admin",)),
    "books.update": Policy(roles=("admin",)),
    "books.delete": Policy(roles=("admin",)),
    "borrow.create": Policy(roles=("user",), requires_user_id=True),
    "borrow.my_logs": Policy(roles=("user",), requires_user_id=True),
    "borrow.logs": Policy(roles=("admin",)),
}


def _parse_user_id(raw) -> int | None:
    text = (raw or "").strip()
    if not is_id_text(text):
        return None
    value = int(text)
    return value if 1 <= value <= MAX_ID else None


def authorize(
    operation: str,
    headers,
    role_header: str = "x-user-role",
    user_id_header: str = "x-user-id",
) -> tuple[Identity | None, AppError | None]:
    """
    Başlıklardan rolü ve kullanıcı id'sini çıkarır, POLICIES tablosuna göre kontrol eder.
    Sıra: rol var mı -> rol geçerli mi -> operasyona izinli mi -> (gerekiyorsa) user id.
    """
    policy = POLICIES[operation]

    role = (headers.get(role_header) or "").strip().lower()
    if not role:
        return None, AppError(ErrorKind.MISSING_HEADER, f"Missing required header: {role_header}")

    if role not in VALID_ROLES:
        return None, AppError(
            ErrorKind.INVALID_ROLE,
            f"Invalid role: '{role}'. Valid roles are: {', '.join(VALID_ROLES)}",
        )

    if role not in policy.roles:
        return None, AppError(
            ErrorKind.FORBIDDEN,
            f"Access denied. This endpoint requires role: {' or '.join(policy.roles)}",
        )

    raw_user_id = headers.get(user_id_header)
    user_id = _parse_user_id(raw_user_id)

    if policy.requires_user_id:
        if raw_user_id is None or not raw_user_id.strip():
            return None, AppError(ErrorKind.MISSING_HEADER, f"Missing required header: {user_id_header}")
        if user_id is None:
            return None, AppError(
                ErrorKind.INVALID_IDENTITY,
                f"Invalid {user_id_header}: must be a positive integer",
            )

    return Identity(role=role, user_id=user_id), None
