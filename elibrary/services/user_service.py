from elibrary.errors import ConflictError, NotFoundError, ValidationError
from elibrary.repositories.borrow_repo import BorrowRepo
from elibrary.repositories.user_repo import UserRepo
from elibrary.utils.validators import parse_bool, validate_profile_payload

ADMIN_EDITABLE = ("name", "email", "role", "student_id", "phone", "address", "is_active")


class UserService:
    @staticmethod
    def get_user(user_id: int):
        user = UserRepo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def update_profile(user, data: dict):
        clean = validate_profile_payload(data)
        for k, v in clean.items():
            setattr(user, k, v)
        UserRepo.commit()
        return user

    @staticmethod
    def admin_update(user_id: int, data: dict):
        user = UserService.get_user(user_id)
        # şifre bu yoldan değişmez
        data = {k: v for k, v in data.items() if k in ADMIN_EDITABLE}

        if "email" in data and data["email"] != user.email:
            other = UserRepo.get_by_email(data["email"])
            if other and other.id != user.id:
                raise ConflictError("Email already registered")
        if "role" in data and data["role"] not in ("admin", "user"):
            raise ValidationError("Invalid role")
        if "is_active" in data:
            data["is_active"] = parse_bool(data["is_active"], "is_active")
            if not data["is_active"] and user.is_active:
                UserService._ensure_no_active_borrows(user)

        profile = validate_profile_payload(data)
        for k, v in data.items():
            setattr(user, k, profile.get(k, v))
        UserRepo.commit()
        return user

    @staticmethod
    def _ensure_no_active_borrows(user):
        if BorrowRepo.count_active_for_user(user.id) > 0:
            raise ConflictError("Cannot deactivate user with active book borrows")

    @staticmethod
    def toggle_status(user_id: int):
        user = UserService.get_user(user_id)
        if user.is_active:
            UserService._ensure_no_active_borrows(user)
        user.is_active = not user.is_active
        UserRepo.commit()
        return user

    @staticmethod
    def dashboard_stats() -> dict:
        return {
            "total_users": UserRepo.count(role="user"),
            "active_users": UserRepo.count(role="user", active=True),
            "total_borrows": BorrowRepo.count_by_status(),
            "active_borrows": BorrowRepo.count_by_status("borrowed", "overdue"),
            "overdue_borrows": BorrowRepo.count_by_status("overdue"),
        }
