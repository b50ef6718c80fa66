import click
from flask import current_app

from library_api.db_objects import begin_write, sync_tables
from library_api.extensions import db
from library_api.models.book import Book
from library_api.repositories.book_repo import BookRepo

SAMPLE_BOOKS = [
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "stock": 5},
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "stock": 3},
    {"title": "1984", "author": "George Orwell", "stock": 7},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "stock": 4},
    {"title": "The Catcher in the Rye", "author": "J.D. Salinger", "stock": 2},
    {"title": "One Hundred Years of Solitude", "author": "Gabriel García Márquez", "stock": 6},
    {"title": "The Lord of the Rings", "author": "J.R.R. Tolkien", "stock": 8},
    {"title": "Harry Potter and the Sorcerer's Stone", "author": "J.K. Rowling", "stock": 10},
    {"title": "The Hitchhiker's Guide to the Galaxy", "author": "Douglas Adams", "stock": 4},
    {"title": "Brave New World", "author": "Aldous Huxley", "stock": 3},
]


def seed_books(session):
    """Katalog boşsa örnek kitapları ekler. return: eklenen kitaplar (boş değilse [])."""
    begin_write(session)
    repo = BookRepo(session)
    if repo.count() > 0:
        session.rollback()
        return []

    created = [repo.add(Book(**row)) for row in SAMPLE_BOOKS]
    session.commit()
    return created


def register_cli(app):
    @app.cli.command("sync-db")
    @click.option("--force", is_flag=True, help="Drop and recreate all tables.")
    def sync_db_command(force):
        """Create (or recreate) the database tables."""
        if force:
            click.echo("WARNING: force sync enabled, tables will be dropped and recreated.")
        tables = sync_tables(current_app, force=force)
        click.echo("Tables created/verified:")
        for name in tables:
            click.echo(f"  - {name}")

    @app.cli.command("seed-books")
    def seed_books_command():
        """Insert sample books when the catalog is empty."""
        begin_write(db.session)
        existing = BookRepo(db.session).count()
        if existing:
            click.echo(f"Database already has {existing} books. Skipping seed.")
            click.echo("To reset and reseed, run: flask sync-db --force")
            return

        for book in seed_books(db.session):
            click.echo(f'  Created: "{book.title}" by {book.author} (Stock: {book.stock})')
        click.echo(f"Seeded {len(SAMPLE_BOOKS)} books.")
