from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import text

Base = declarative_base()


class User(Base):
    """Guild member record holding the credit balance."""
    __tablename__ = 'users'

    id = Column(String, primary_key=True)  # Discord user id
    credits = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    warnings = relationship("Warning", back_populates="warned_user", foreign_keys="Warning.warned_user_id")


class Warning(Base):
    """Moderation warning issued by a staff member."""
    __tablename__ = 'warnings'

    id = Column(Integer, primary_key=True, autoincrement=True)
    warned_user_id = Column(String, ForeignKey('users.id'), nullable=False)
    issuer_id = Column(String, nullable=False)
    reason = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="General")
    severity = Column(Integer, nullable=False, default=5)
    created_at = Column(DateTime, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    warned_user = relationship("User", back_populates="warnings", foreign_keys=[warned_user_id])

    __table_args__ = (
        Index('idx_warnings_user_created', 'warned_user_id', 'created_at'),
    )
