def _iso(dt):
    return dt.isoformat() if dt else None


def user_json(u, brief: bool = False):
    if u is None:
        return None
    data = {"id": u.id, "name": u.name, "email": u.email}
    if brief:
        return data
    data.update({
        "username": u.username,
        "role": u.role,
        "student_id": u.student_id,
        "phone": u.phone,
        "address": u.address,
        "is_active": bool(u.is_active),
        "borrowed_books": [b.id for b in u.borrowed_books],
        "created_at": _iso(u.created_at),
    })
    return data


def book_json(b, brief: bool = False):
    if b is None:
        return None
    data = {
        "id": b.id,
        "title": b.title,
        "author": b.author,
        "isbn": b.isbn,
        "category": b.category,
    }
    if brief:
        return data
    data.update({
        "publisher": b.publisher,
        "published_year": b.published_year,
        "description": b.description,
        "language": b.language,
        "pages": b.pages,
        "cover_image": b.cover_image,
        "total_copies": b.total_copies,
        "available_copies": b.available_copies,
        "location": b.location,
        "is_active": bool(b.is_active),
        "added_by": user_json(b.added_by, brief=True),
        "created_at": _iso(b.created_at),
        "updated_at": _iso(b.updated_at),
    })
    return data


def borrow_json(x, **extra):
    data = {
        "id": x.id,
        "user": user_json(x.user, brief=True),
        "book": book_json(x.book, brief=True),
        "borrow_date": _iso(x.borrow_date),
        "due_date": _iso(x.due_date),
        "return_date": _iso(x.return_date),
        "status": x.status,
        "fine": x.fine,
        "renewal_count": x.renewal_count,
        "notes": x.notes,
        "return_condition": x.return_condition,
        "issued_by": x.issued_by_id,
        "returned_by": x.returned_by_id,
    }
    data.update(extra)
    return data


def review_json(r):
    return {
        "id": r.id,
        "user": {"id": r.user.id, "name": r.user.name} if r.user else None,
        "book_id": r.book_id,
        "rating": r.rating,
        "title": r.title,
        "review": r.body,
        "is_approved": bool(r.is_approved),
        "helpful_count": r.helpful_count,
        "helpful_percentage": r.helpful_percentage,
        "is_reported": bool(r.is_reported),
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }
