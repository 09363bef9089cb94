from sqlalchemy import or_

from elibrary.models.user import User
from elibrary.extensions import db


class UserRepo:
    @staticmethod
    def get_by_username(username: str):
        return User.query.filter_by(username=username).first()

    @staticmethod
    def get_by_email(email: str):
        return User.query.filter_by(email=email).first()

    @staticmethod
    def get_by_id(user_id: int):
        return db.session.get(User, user_id)

    @staticmethod
    def search(search: str | None = None, role: str | None = None, active: bool | None = None):
        q = User.query
        if search:
            like = f"%{search}%"
            q = q.filter(or_(
                User.name.ilike(like),
                User.username.ilike(like),
                User.email.ilike(like),
                User.student_id.ilike(like),
            ))
        if role:
            q = q.filter(User.role == role)
        if active is not None:
            q = q.filter(User.is_active.is_(active))
        return q.order_by(User.created_at.desc(), User.id.desc())

    @staticmethod
    def count(role: str | None = None, active: bool | None = None) -> int:
        q = User.query
        if role:
            q = q.filter(User.role == role)
        if active is not None:
            q = q.filter(User.is_active.is_(active))
        return q.count()

    @staticmethod
    def create(user: User):
        db.session.add(user)
        db.session.commit()
        return user

    @staticmethod
    def commit():
        db.session.commit()
