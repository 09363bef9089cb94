from elibrary.errors import ConflictError, NotFoundError
from elibrary.models.book import Book
from elibrary.repositories.book_repo import BookRepo
from elibrary.utils.validators import validate_book_payload

UPDATABLE_FIELDS = (
    "title", "author", "isbn", "publisher", "published_year", "category",
    "description", "language", "pages", "cover_image",
)


class BookService:
    @staticmethod
    def search_books(search=None, category=None, available_only=False):
        return BookRepo.search(search=search, category=category, available_only=available_only)

    @staticmethod
    def get_book(book_id: int, include_inactive: bool = False):
        book = BookRepo.get(book_id)
        if not book or (not book.is_active and not include_inactive):
            raise NotFoundError("Book not found")
        return book

    @staticmethod
    def create_book(data: dict, added_by_id: int | None = None):
        clean = validate_book_payload(data)
        if BookRepo.get_by_isbn(clean["isbn"]):
            raise ConflictError("Book with this ISBN already exists")

        location = clean.pop("location")
        book = Book(
            **clean,
            shelf=location["shelf"],
            section=location["section"],
            available_copies=clean["total_copies"],
            added_by_id=added_by_id,
        )
        return BookRepo.create(book)

    @staticmethod
    def update_book(book_id: int, data: dict):
        book = BookService.get_book(book_id, include_inactive=True)

        # available_copies doğrudan değiştirilemez
        data = {k: v for k, v in data.items() if k != "available_copies"}
        clean = validate_book_payload(data, partial=True)

        if "isbn" in clean and clean["isbn"] != book.isbn:
            other = BookRepo.get_by_isbn(clean["isbn"])
            if other and other.id != book.id:
                raise ConflictError("Book with this ISBN already exists")

        for k in UPDATABLE_FIELDS:
            if k in clean:
                setattr(book, k, clean[k])

        if "location" in clean:
            book.shelf = clean["location"].get("shelf", book.shelf)
            book.section = clean["location"].get("section", book.section)

        # toplam değişirse ödünçteki kopya sayısı korunur
        if "total_copies" in clean:
            on_loan = book.copies_on_loan
            book.total_copies = clean["total_copies"]
            book.available_copies = max(0, book.total_copies - on_loan)

        if "is_active" in clean:
            book.is_active = clean["is_active"]

        BookRepo.update()
        return book

    @staticmethod
    def delete_book(book_id: int):
        """Soft delete: sadece tüm kopyalar raftayken."""
        book = BookService.get_book(book_id, include_inactive=True)
        if book.available_copies < book.total_copies:
            raise ConflictError(
                "Cannot delete book with active borrows. Please ensure all copies are returned first."
            )
        book.is_active = False
        BookRepo.update()
        return book
