from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token

from elibrary.errors import ConflictError, ForbiddenError, LibraryError
from elibrary.models.user import User
from elibrary.repositories.user_repo import UserRepo
from elibrary.services.notification_service import NotificationService


class AuthService:
    @staticmethod
    def register(username: str, name: str, email: str, password: str, role: str = "user", **profile):
        if UserRepo.get_by_username(username) or UserRepo.get_by_email(email):
            raise ConflictError("Username or email already registered")

        user = User(
            username=username,
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            student_id=profile.get("student_id"),
            phone=profile.get("phone"),
            address=profile.get("address"),
        )
        UserRepo.create(user)

        # hoş geldin maili: hata olursa kayıt yine başarılı
        NotificationService.dispatch(NotificationService.send_welcome, user.id)
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "username": user.username}
        )

    @staticmethod
    def login(username: str, password: str):
        user = UserRepo.get_by_username(username) or UserRepo.get_by_email(username)
        if not user or not check_password_hash(user.password_hash, password):
            raise LibraryError("Invalid username or password", 401)
        if not user.is_active:
            raise ForbiddenError("Account is deactivated")

        return AuthService.issue_token(user), user
