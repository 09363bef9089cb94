# elibrary/utils/validators.py
import re
from datetime import datetime, timezone

from elibrary.errors import ValidationError
from elibrary.models.book import CATEGORIES
from elibrary.models.review import REPORT_REASONS

# 10 ya da 13 rakam, tire serbest
ISBN_RE = re.compile(r"^(?=(?:\D*\d){10}(?:(?:\D*\d){3})?$)[\d-]+$")
PHONE_RE = re.compile(r"^\d{10}$")


def _text(data: dict, key: str, required: bool, max_len: int | None = None, min_len: int = 1):
    value = data.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    value = str(value).strip()
    if len(value) < min_len:
        if min_len <= 1:
            raise ValidationError(f"{key} is required")
        raise ValidationError(f"{key} must be at least {min_len} characters long")
    if max_len is not None and len(value) > max_len:
        raise ValidationError(f"{key} cannot be more than {max_len} characters")
    return value


def parse_int(value, name: str, minimum: int | None = None, maximum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{name} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{name} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{name} cannot exceed {maximum}")
    return number


def parse_datetime(value, name: str = "date") -> datetime:
    """ISO-8601 -> naive UTC datetime."""
    if not value or not isinstance(value, str):
        raise ValidationError(f"Valid {name} is required")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Valid {name} is required")
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_bool_arg(value):
    if value is None:
        return None
    return str(value).lower() in ("1", "true", "yes")


def parse_bool(value, name: str) -> bool:
    """JSON gövdesi için: sadece true/false."""
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false")
    return value


def validate_book_payload(data: dict, partial: bool = False) -> dict:
    required = not partial
    clean = {}

    for key, max_len in (("title", 200), ("author", 100), ("publisher", 100)):
        if required or key in data:
            clean[key] = _text(data, key, True, max_len)

    if required or "isbn" in data:
        isbn = _text(data, "isbn", True)
        if not ISBN_RE.match(isbn):
            raise ValidationError("Please enter a valid ISBN")
        clean["isbn"] = isbn

    if required or "published_year" in data:
        clean["published_year"] = parse_int(
            data.get("published_year"), "published_year", 1000, datetime.utcnow().year
        )

    if required or "category" in data:
        category = data.get("category")
        if category not in CATEGORIES:
            raise ValidationError("Valid category is required")
        clean["category"] = category

    if required or "total_copies" in data:
        clean["total_copies"] = parse_int(data.get("total_copies"), "total_copies", 1)

    if required or "location" in data:
        location = data.get("location") or {}
        if not isinstance(location, dict):
            raise ValidationError("location must be an object")
        if required:
            clean["location"] = {
                "shelf": _text(location, "shelf", True, 50),
                "section": _text(location, "section", True, 50),
            }
        else:
            clean["location"] = {
                k: _text(location, k, True, 50) for k in ("shelf", "section") if k in location
            }

    if "description" in data:
        clean["description"] = _text(data, "description", False, 1000, min_len=0)
    if "language" in data:
        clean["language"] = _text(data, "language", True, 50)
    if "pages" in data and data.get("pages") is not None:
        clean["pages"] = parse_int(data.get("pages"), "pages", 1)
    if "cover_image" in data:
        clean["cover_image"] = (data.get("cover_image") or "").strip()
    if partial and "is_active" in data:
        clean["is_active"] = parse_bool(data.get("is_active"), "is_active")

    return clean


def validate_review_payload(data: dict, partial: bool = False) -> dict:
    required = not partial
    clean = {}
    if required or "rating" in data:
        rating = data.get("rating")
        if isinstance(rating, float) and not rating.is_integer():
            raise ValidationError("Rating must be a whole number")
        clean["rating"] = parse_int(rating, "rating", 1, 5)
    if required or "title" in data:
        clean["title"] = _text(data, "title", True, 100, min_len=5)
    if required or "review" in data:
        clean["body"] = _text(data, "review", True, 1000, min_len=10)
    return clean


def validate_report_reason(reason) -> str:
    if reason not in REPORT_REASONS:
        raise ValidationError(f"reason must be one of: {', '.join(REPORT_REASONS)}")
    return reason


def validate_profile_payload(data: dict) -> dict:
    clean = {}
    if "name" in data:
        clean["name"] = _text(data, "name", True, 100, min_len=2)
    if "phone" in data and data.get("phone") not in (None, ""):
        phone = str(data["phone"]).strip()
        if not PHONE_RE.match(phone):
            raise ValidationError("Please enter a valid 10-digit phone number")
        clean["phone"] = phone
    if "address" in data:
        clean["address"] = _text(data, "address", False, 200, min_len=0)
    return clean


def parse_amount(value, name: str = "amount") -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if amount < 0:
        raise ValidationError(f"{name} cannot be negative")
    return amount
