from database import Base
from sqlalchemy import Column, String, Boolean, Enum
import enum


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    BHW = "BHW"
    BNS = "BNS"
    MIDWIFE = "Midwife"


class Profile(Base):
    __tablename__ = 'profiles'

    # Same identifier as the auth provider's "sub" claim
    id = Column(String, primary_key=True, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role = Column(Enum(UserRole), nullable=False)
    is_active = Column(Boolean, default=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self):
        return f"<Profile(id={self.id}, name={self.full_name}, role={self.role}, is_active={self.is_active})>"
