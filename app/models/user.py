from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(500), nullable=False)
    role = Column(String(20), nullable=False, default="User")

    # sha256 of the outstanding reset token, cleared once used
    reset_token_hash = Column(String(128), nullable=True)
    reset_token_expires = Column(DateTime, nullable=True)
