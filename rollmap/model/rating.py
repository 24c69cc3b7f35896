"""Rating - reviews and per-place rating summaries.

PlaceStats mirrors one row of the location_stats view, Rating one row of
the ratings table. RatingDraft is the validated form input that becomes an
insert payload.
"""

from dataclasses import dataclass, field
from typing import Any

from rollmap.constants import RatingConfig


@dataclass(frozen=True)
class PlaceStats:
    """A place with its rating count and average stars."""

    location_id: str
    name: str
    description: str
    lat: float | None
    lng: float | None
    rating_count: int
    avg_stars: float | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlaceStats":
        """Create PlaceStats from a location_stats row."""
        return cls(
            location_id=str(data["location_id"]),
            name=data.get("name") or "Untitled",
            description=data.get("description") or "",
            lat=data.get("lat"),
            lng=data.get("lng"),
            rating_count=int(data.get("rating_count") or 0),
            avg_stars=data.get("avg_stars"),
        )

    @property
    def header_text(self) -> str:
        """Summary line, e.g. "★ 4.50 · 2 reviews"."""
        if not self.rating_count or self.avg_stars is None:
            return "No ratings yet"
        plural = "" if self.rating_count == 1 else "s"
        return f"★ {self.avg_stars:.2f} · {self.rating_count} review{plural}"


@dataclass(frozen=True)
class Rating:
    """One submitted review."""

    id: str
    location_id: str
    stars: int
    extras: list[str]
    sauce: str | None
    price_pence: int | None
    notes: str | None
    created_at: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Rating":
        """Create Rating from a ratings row."""
        return cls(
            id=str(data["id"]),
            location_id=str(data["location_id"]),
            stars=int(data["stars"]),
            extras=list(data.get("extras") or []),
            sauce=data.get("sauce"),
            price_pence=data.get("price_pence"),
            notes=data.get("notes"),
            created_at=str(data.get("created_at") or ""),
        )

    @property
    def star_bar(self) -> str:
        """Filled and empty stars, e.g. "★★★☆☆"."""
        filled = max(0, min(RatingConfig.MAX_STARS, self.stars))
        return "★" * filled + "☆" * (RatingConfig.MAX_STARS - filled)

    @property
    def price_text(self) -> str | None:
        """Price in pounds, e.g. "£3.50", or None when not given."""
        if self.price_pence is None:
            return None
        return f"{RatingConfig.CURRENCY_SYMBOL}{self.price_pence / RatingConfig.PENCE_PER_POUND:.2f}"

    @property
    def date_text(self) -> str:
        """Creation date as DD/MM/YYYY (timestamp prefix YYYY-MM-DD)."""
        date = self.created_at[:10]
        parts = date.split("-")
        if len(parts) != 3:
            return date
        year, month, day = parts
        return f"{day}/{month}/{year}"


@dataclass(frozen=True)
class RatingDraft:
    """Validated review form input.

    Attributes:
        location_id: Place being reviewed
        stars: 1-5
        sauce: One of RatingConfig.SAUCES ("None" means no sauce)
        extras: Chosen extras
        price_pence: Parsed price, None when left blank
        notes: Free text
    """

    location_id: str
    stars: int
    sauce: str = RatingConfig.DEFAULT_SAUCE
    extras: list[str] = field(default_factory=list)
    price_pence: int | None = None
    notes: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Insert payload for the ratings table."""
        notes = self.notes.strip()
        return {
            "location_id": self.location_id,
            "stars": int(self.stars),
            "sauce": None if self.sauce == RatingConfig.NO_SAUCE else self.sauce,
            "extras": list(self.extras or []),
            "price_pence": self.price_pence,
            "notes": notes or None,
        }
