from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class City(db.Model):
    __tablename__ = "cities"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


class Location(db.Model):
    """A mart visited by field staff."""
    __tablename__ = "locations"
    __table_args__ = (
        db.Index("ix_locations_city_id", "city_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    mart_name = db.Column(db.String(255), nullable=False)
    area = db.Column(db.String(255), nullable=False, default="")

    # city_name is a denormalized copy; city_id may be a free-form id when
    # the city is not registered
    city_id = db.Column(db.String(64), nullable=True)
    city_name = db.Column(db.String(120), nullable=True)

    lat = db.Column(db.Float, nullable=True)
    lng = db.Column(db.Float, nullable=True)
    radius_meters = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    @property
    def sale_label(self) -> str:
        """'<mart> - <area>' as captured on sale records."""
        label = f"{self.mart_name or ''}{' - ' + self.area if self.area else ''}".strip()
        return label or str(self.id)

    @property
    def display_label(self) -> str:
        return " • ".join(part for part in (self.mart_name, self.area, self.city_name) if part)

    def to_snapshot(self) -> dict:
        """Display attributes copied into journey plans at save time."""
        return {
            "id": self.id,
            "name": self.display_label,
            "martName": self.mart_name,
            "area": self.area,
            "cityName": self.city_name,
            "lat": self.lat,
            "lng": self.lng,
            "radiusMeters": self.radius_meters,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "martName": self.mart_name,
            "area": self.area,
            "cityId": self.city_id,
            "cityName": self.city_name,
            "lat": self.lat,
            "lng": self.lng,
            "radiusMeters": self.radius_meters,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
            # aliases read by older clients
            "name": self.display_label,
            "city": self.city_name or "",
        }


class Product(db.Model):
    """Product master. Ids are supplied by admins (e.g. SKU codes)."""
    __tablename__ = "products"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    brand_name = db.Column(db.String(255), nullable=False, default="")
    quantity = db.Column(db.Float, nullable=True)

    # Per-unit weight; sales snapshot it at recording time
    weight = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "brandName": self.brand_name,
            "quantity": self.quantity,
            "weight": self.weight,
            "createdAt": to_utc_z(self.created_at),
        }
