from sqlalchemy import or_

from elibrary.models.book import Book
from elibrary.extensions import db


class BookRepo:
    @staticmethod
    def search(search: str | None = None, category: str | None = None, available_only: bool = False):
        q = Book.query.filter(Book.is_active.is_(True))
        if search:
            like = f"%{search}%"
            q = q.filter(or_(
                Book.title.ilike(like),
                Book.author.ilike(like),
                Book.isbn.ilike(like),
                Book.publisher.ilike(like),
                Book.category.ilike(like),
            ))
        if category:
            q = q.filter(Book.category == category)
        if available_only:
            q = q.filter(Book.available_copies > 0)
        return q.order_by(Book.created_at.desc(), Book.id.desc())

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def get_by_isbn(isbn: str):
        return Book.query.filter_by(isbn=isbn).first()

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        db.session.commit()
        return book

    @staticmethod
    def update():
        db.session.commit()
