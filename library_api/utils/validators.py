# library_api/utils/validators.py
"""
Saf doğrulama fonksiyonları (I/O yok).

Her kural `(ok, message)` döner; payload doğrulayıcıları `(clean_data, AppError | None)` döner.
"""
from __future__ import annotations

import math

from library_api.errors import AppError, ErrorKind

MAX_STRING_LENGTH = 255
LAT_RANGE = (-90.0, 90.0)
LNG_RANGE = (-180.0, 180.0)

# 64-bit INTEGER üst sınırı; daha büyük id DB sürücüsünde taşar
MAX_ID = 2**63 - 1


def _as_int(value):
    # bool da int'tir; onu kabul etme
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def check_id(value, label: str = "ID") -> tuple[bool, str | None]:
    if value is None or value == "":
        return False, f"{label} is required"
    number = _as_int(value)
    if number is None:
        return False, f"{label} must be an integer"
    if number < 1:
        return False, f"{label} must be a positive integer"
    if number > MAX_ID:
        return False, f"{label} is out of range"
    return True, None


def check_coordinate(value, label: str, bounds: tuple[float, float]) -> tuple[bool, str | None]:
    low, high = bounds
    if value is None:
        return False, f"{label} is required"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, f"{label} must be a number"
    # büyük int float'a çevrilemez; aralık kontrolü int üzerinden yapılır
    if isinstance(value, float) and not math.isfinite(value):
        return False, f"{label} must be a number"
    if value < low or value > high:
        return False, f"{label} must be between {low:g} and {high:g}"
    return True, None


def check_latitude(value) -> tuple[bool, str | None]:
    return check_coordinate(value, "Latitude", LAT_RANGE)


def check_longitude(value) -> tuple[bool, str | None]:
    return check_coordinate(value, "Longitude", LNG_RANGE)


def check_string(value, label: str) -> tuple[bool, str | None]:
    if value is None:
        return False, f"{label} is required"
    if not isinstance(value, str):
        return False, f"{label} must be a string"
    if not value.strip():
        return False, f"{label} cannot be empty"
    if len(value.strip()) > MAX_STRING_LENGTH:
        return False, f"{label} must be between 1 and {MAX_STRING_LENGTH} characters"
    return True, None


def check_stock(value) -> tuple[bool, str | None]:
    number = _as_int(value)
    if number is None:
        return False, "Stock must be an integer"
    if number < 0:
        return False, "Stock cannot be negative"
    if number > MAX_ID:
        return False, "Stock is out of range"
    return True, None


def is_id_text(text: str) -> bool:
    # MAX_ID 19 hane; daha uzun metni int'e çevirmeye gerek yok
    return text.isascii() and text.isdigit() and len(text) <= len(str(MAX_ID))


def parse_path_id(raw) -> tuple[int | None, AppError | None]:
    """URL'den gelen id (string) -> pozitif int."""
    text = str(raw).strip()
    if not is_id_text(text) or not 1 <= int(text) <= MAX_ID:
        return None, AppError(ErrorKind.VALIDATION, "Invalid book ID: must be a number")
    return int(text), None


def _failure(failures: list[dict]) -> AppError:
    return AppError(ErrorKind.VALIDATION, failures[0]["message"], details=failures)


def validate_borrow_payload(body) -> tuple[dict | None, AppError | None]:
    if not isinstance(body, dict):
        return None, AppError(ErrorKind.VALIDATION, "Request body must be a JSON object")

    checks = [
        ("bookId", check_id(body.get("bookId"), "Book ID")),
        ("latitude", check_latitude(body.get("latitude"))),
        ("longitude", check_longitude(body.get("longitude"))),
    ]
    failures = [{"field": name, "message": msg} for name, (ok, msg) in checks if not ok]
    if failures:
        return None, _failure(failures)

    return {
        "book_id": _as_int(body["bookId"]),
        "latitude": float(body["latitude"]),
        "longitude": float(body["longitude"]),
    }, None


def validate_book_payload(body, partial: bool = False) -> tuple[dict | None, AppError | None]:
    """
    partial=False -> create (title + author zorunlu, stock opsiyonel, default 0)
    partial=True  -> update (sadece gönderilen alanlar)
    """
    if not isinstance(body, dict):
        return None, AppError(ErrorKind.VALIDATION, "Request body must be a JSON object")

    failures = []
    clean = {}

    for key, label in (("title", "Title"), ("author", "Author")):
        if partial and key not in body:
            continue
        ok, msg = check_string(body.get(key), label)
        if ok:
            clean[key] = body[key].strip()
        else:
            failures.append({"field": key, "message": msg})

    if "stock" in body:
        ok, msg = check_stock(body.get("stock"))
        if ok:
            clean["stock"] = _as_int(body["stock"])
        else:
            failures.append({"field": "stock", "message": msg})
    elif not partial:
        clean["stock"] = 0

    if failures:
        return None, _failure(failures)

    if partial and not clean:
        return None, AppError(ErrorKind.VALIDATION, "No valid fields provided for update")

    return clean, None
