"""
도메인 모델 패키지
"""

# 관계 문자열("Developer", "Genre")이 해석되도록 모든 모델을 함께 등록
from .developer import Developer, TechnicalSheet
from .genre import Genre
from .game import Game, game_genres

__all__ = [
    "Developer",
    "TechnicalSheet",
    "Genre",
    "Game",
    "game_genres",
]
