"""
게임 도메인 모델
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from catalog.db.database import Base
from catalog.models.enums import AgeRating

# 게임-장르 연관 테이블 (게임이 소유하는 쪽)
game_genres = Table(
    "game_genres",
    Base.metadata,
    Column("game_id", Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="RESTRICT"), primary_key=True, index=True),
)


class Game(Base):
    """게임 모델"""
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    release_year = Column(Integer, nullable=False, index=True)
    age_rating = Column(SQLEnum(AgeRating), nullable=False)

    developer_id = Column(Integer, ForeignKey("developers.id", ondelete="RESTRICT"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 비동기 세션에서 지연 로딩을 피하기 위해 selectin 사용
    developer = relationship("Developer", lazy="selectin")
    genres = relationship("Genre", secondary=game_genres, lazy="selectin", order_by="Genre.id")

    def __repr__(self):
        return f"<Game {self.id}: {self.title}>"
