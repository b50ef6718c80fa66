from flask import Flask, jsonify, request
from library_api.config import Config
from library_api.extensions import db, migrate

from library_api.db_objects import ensure_db_objects
from library_api.errors import register_error_handlers


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # 1) Önce db init (db.engine / db.session için şart)
    db.init_app(app)

    # 2) SQLite kilit/FK ayarları + tablolar (db init sonrası)
    ensure_db_objects(app)

    # 3) Diğer extension'lar
    migrate.init_app(app, db)

    # 4) API blueprintleri
    from library_api.controllers.book_controller import book_bp
    from library_api.controllers.borrow_controller import borrow_bp
    app.register_blueprint(book_bp, url_prefix="/api/books")
    app.register_blueprint(borrow_bp, url_prefix="/api/borrow")

    register_error_handlers(app)

    from library_api.cli import register_cli, seed_books
    register_cli(app)

    if app.config.get("SEED_ON_START"):
        with app.app_context():
            seeded = seed_books(db.session)
            app.logger.info(f"[seed] {len(seeded)} sample books inserted.")

    @app.before_request
    def _log_request():
        app.logger.debug(
            f"[request] {request.method} {request.path} "
            f"role={request.headers.get(app.config['ROLE_HEADER'])} "
            f"user_id={request.headers.get(app.config['USER_ID_HEADER'])}"
        )

    @app.get("/")
    def root():
        return jsonify({
            "success": True,
            "message": "Welcome to Library System API with Geolocation",
            "documentation": "/api",
            "version": "1.0.0",
        })

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.get("/api")
    def api_index():
        return jsonify({
            "success": True,
            "message": "Library System API is running",
            "version": "1.0.0",
            "endpoints": {
                "books": {
                    "GET /api/books": "Get all books (Public)",
                    "GET /api/books/:id": "Get book by ID (Public)",
                    "POST /api/books": "Create book (Admin)",
                    "PUT /api/books/:id": "Update book (Admin)",
                    "DELETE /api/books/:id": "Delete book (Admin)",
                },
                "borrow": {
                    "POST /api/borrow": "Borrow a book (User)",
                    "GET /api/borrow/my-logs": "Get my borrow history (User)",
                    "GET /api/borrow/logs": "Get all borrow logs (Admin)",
                },
            },
            "headers": {
                app.config["ROLE_HEADER"]: "admin | user",
                app.config["USER_ID_HEADER"]: "integer (required for user role)",
            },
        })

    return app
