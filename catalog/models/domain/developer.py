"""
개발사 도메인 모델
"""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from catalog.db.database import Base


class Developer(Base):
    """개발사 모델"""
    __tablename__ = "developers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    founded_on = Column(Date, nullable=True)
    country = Column(String(80), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 기술 시트는 개발사와 생명주기를 공유 (함께 생성/삭제, 고아 제거)
    technical_sheet = relationship(
        "TechnicalSheet",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Developer {self.id}: {self.name}>"


class TechnicalSheet(Base):
    """개발사 기술 시트 모델"""
    __tablename__ = "technical_sheets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    developer_id = Column(
        Integer, ForeignKey("developers.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    history = Column(Text, nullable=True)
    notable_games = Column(String(200), nullable=True)
    awards = Column(Text, nullable=True)

    def __repr__(self):
        return f"<TechnicalSheet for developer {self.developer_id}>"
