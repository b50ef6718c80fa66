# library_api/controllers/book_controller.py

from flask import Blueprint, request, jsonify
from library_api.errors import error_response
from library_api.extensions import db
from library_api.services.book_service import BookService
from library_api.utils.decorators import guarded

book_bp = Blueprint("books", __name__)


@book_bp.get("")
def list_books():
    books = BookService(db.session).list_books()
    return jsonify({
        "success": True,
        "message": "Books retrieved successfully",
        "count": len(books),
        "data": [b.to_dict() for b in books],
    })


@book_bp.get("/<book_id>")
def get_book(book_id):
    book, err = BookService(db.session).get_book(book_id)
    if err:
        return error_response(err)
    return jsonify({"success": True, "message": "Book retrieved successfully", "data": book.to_dict()})


@book_bp.post("")
@guarded("books.create")
def create_book():
    data = request.get_json(silent=True)
    book, err = BookService(db.session).create_book(data)
    if err:
        return error_response(err)
    return jsonify({"success": True, "message": "Book created successfully", "data": book.to_dict()}), 201


@book_bp.put("/<book_id>")
@guarded("books.update")
def update_book(book_id):
    data = request.get_json(silent=True)
    book, err = BookService(db.session).update_book(book_id, data)
    if err:
        return error_response(err)
    return jsonify({"success": True, "message": "Book updated successfully", "data": book.to_dict()})


@book_bp.delete("/<book_id>")
@guarded("books.delete")
def delete_book(book_id):
    deleted, err = BookService(db.session).delete_book(book_id)
    if err:
        return error_response(err)
    return jsonify({"success": True, "message": "Book deleted successfully", "data": deleted})
