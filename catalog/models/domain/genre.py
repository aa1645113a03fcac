"""
장르 도메인 모델
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from catalog.db.database import Base


class Genre(Base):
    """장르 모델 (게임 목록은 game_genres 연관 테이블로만 참조)"""
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(200), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Genre {self.id}: {self.name}>"
