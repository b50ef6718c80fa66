from flask import Blueprint, request, jsonify, g
from library_api.errors import error_response
from library_api.extensions import db
from library_api.services.borrow_service import BorrowService
from library_api.utils.decorators import guarded

borrow_bp = Blueprint("borrow", __name__)


def _logs_response(message, records):
    return jsonify({
        "success": True,
        "message": message,
        "count": len(records),
        "data": [r.to_dict(include_book=True) for r in records],
    })


@borrow_bp.post("")
@guarded("borrow.create")
def borrow_book():
    data = request.get_json(silent=True)
    outcome, err = BorrowService(db.session).borrow(g.identity.user_id, data)
    if err:
        return error_response(err)

    book, record = outcome
    return jsonify({
        "success": True,
        "message": "Book borrowed successfully",
        "data": {
            "borrowLog": record.to_dict(),
            "book": {
                "id": book.id,
                "title": book.title,
                "author": book.author,
                "remainingStock": book.stock,
            },
        },
    }), 201


@borrow_bp.get("/my-logs")
@guarded("borrow.my_logs")
def my_borrow_logs():
    records = BorrowService(db.session).list_user_logs(g.identity.user_id)
    return _logs_response("Your borrow logs retrieved successfully", records)


@borrow_bp.get("/logs")
@guarded("borrow.logs")
def all_borrow_logs():
    records = BorrowService(db.session).list_logs()
    return _logs_response("Borrow logs retrieved successfully", records)
