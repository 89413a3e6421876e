"""
User model for authentication.

Users are identified by their immutable username. Admins may manage
companies, jobs and other users.
"""

from sqlalchemy import Column, String, Text, Boolean
from jobly.core.database import Base


class User(Base):
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)  # bcrypt hash
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
