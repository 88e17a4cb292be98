#
# user.py -- user table
#
#
import enum

from sqlalchemy import select

from main import db
from schema.base import Base


class UserRole(str, enum.Enum):
    USER = 'user'
    ADMIN = 'admin'


class User(Base):
    __tablename__ = 'user'

    # non-unique display name
    name = db.Column(db.String(255))

    # identity comes from the auth provider; email is the join key
    email = db.Column(db.String(255), nullable=False, index=True, unique=True)

    image = db.Column(db.String(1024))

    role = db.Column(db.String(50), nullable=False, default=UserRole.USER)   # user|admin

    @property
    def display_name(self):
        return self.name or self.email

    @classmethod
    def get(cls, session, user_id):
        if not user_id:
            return None
        return session.get(User, str(user_id))

    @classmethod
    def get_by_email(cls, session, email):
        stmt = select(User).where(User.email == email)
        return session.scalars(stmt).first()

    def is_admin(self):
        return self.role == UserRole.ADMIN

    def encode(self):
        return {
            'id': self.id,
            'name': self.display_name,
            'email': self.email,
            'image': self.image,
        }
