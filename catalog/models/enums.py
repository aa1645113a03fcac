import enum


class AgeRating(str, enum.Enum):
    """Enum for age ratings (minimum recommended audience)."""
    FREE = "FREE"
    NOT_UNDER_10 = "NOT_UNDER_10"
    NOT_UNDER_12 = "NOT_UNDER_12"
    NOT_UNDER_14 = "NOT_UNDER_14"
    NOT_UNDER_16 = "NOT_UNDER_16"
    NOT_UNDER_18 = "NOT_UNDER_18"

    @property
    def description(self) -> str:
        return _AGE_RATING_DESCRIPTIONS[self]


_AGE_RATING_DESCRIPTIONS = {
    AgeRating.FREE: "Suitable for all audiences",
    AgeRating.NOT_UNDER_10: "Not recommended for those under 10",
    AgeRating.NOT_UNDER_12: "Not recommended for those under 12",
    AgeRating.NOT_UNDER_14: "Not recommended for those under 14",
    AgeRating.NOT_UNDER_16: "Not recommended for those under 16",
    AgeRating.NOT_UNDER_18: "Not recommended for those under 18",
}
