from __future__ import annotations

from sqlalchemy import func

from ..extensions import db
from ..models import City, Location, Product
from .concurrency import begin_exclusive, run_with_retry
from ..time_utils import utcnow
from ..validation import ValidationError, ConflictError, NotFoundError, parse_optional_float, require_fields


# -------- lookups used by the schedule and sales services --------

def get_location(location_id) -> Location | None:
    try:
        location_id = int(str(location_id).strip())
    except (TypeError, ValueError):
        return None
    return db.session.get(Location, location_id)


def get_product(product_id) -> Product | None:
    if product_id is None:
        return None
    return db.session.get(Product, str(product_id).strip())


def get_locations_by_ids(ids) -> dict[str, Location]:
    """Map each resolvable reference string to its Location."""
    numeric = set()
    for raw in ids:
        try:
            numeric.add(int(str(raw).strip()))
        except (TypeError, ValueError):
            continue
    if not numeric:
        return {}
    rows = db.session.query(Location).filter(Location.id.in_(numeric)).all()
    return {str(row.id): row for row in rows}


# -------- cities --------

def list_cities() -> list[City]:
    return db.session.query(City).order_by(City.name.asc()).all()


def find_city(*, city_id=None, name=None) -> City | None:
    city = None
    if city_id not in (None, ""):
        try:
            city = db.session.get(City, int(city_id))
        except (TypeError, ValueError):
            city = None
    if city is None and name:
        city = db.session.query(City).filter(
            func.lower(City.name) == str(name).strip().lower()
        ).first()
    return city


def create_city(name) -> City:
    name = str(name or "").strip()
    if not name:
        raise ValidationError("City name is required")

    def _op():
        begin_exclusive()
        if find_city(name=name):
            raise ConflictError("City already exists")
        city = City(name=name)
        db.session.add(city)
        db.session.commit()
        return city

    return run_with_retry(_op)


# -------- locations --------

def list_locations(*, city_id=None, city_name=None) -> list[Location]:
    query = db.session.query(Location)
    if city_id:
        query = query.filter(Location.city_id == str(city_id))
    if city_name:
        query = query.filter(func.lower(Location.city_name) == str(city_name).strip().lower())
    return query.order_by(Location.id.asc()).all()


def _apply_city(location: Location, city_id, city_name) -> None:
    city = find_city(city_id=city_id, name=city_name)
    location.city_id = str(city.id) if city else (str(city_id) if city_id else None)
    location.city_name = city.name if city else city_name


def create_location(payload: dict) -> Location:
    mart_name = payload.get("martName")
    area = payload.get("area")
    city_id = payload.get("cityId")
    city_name = payload.get("city")
    lat = payload.get("lat")
    lng = payload.get("lng")

    message = "martName, area, city/cityId, lat, lng are required"
    require_fields(payload, ["martName", "area", "lat", "lng"], message)
    if not city_id and not city_name:
        raise ValidationError(message)

    def _op():
        begin_exclusive()
        location = Location(
            mart_name=str(mart_name).strip(),
            area=str(area).strip(),
            lat=parse_optional_float(lat),
            lng=parse_optional_float(lng),
            radius_meters=parse_optional_float(payload.get("radiusMeters", payload.get("allowRadiusMeters"))),
        )
        _apply_city(location, city_id, city_name)
        db.session.add(location)
        db.session.commit()
        return location

    return run_with_retry(_op)


def update_location(location_id, payload: dict) -> Location:
    def _op():
        begin_exclusive()
        location = get_location(location_id)
        if not location:
            raise NotFoundError("Location not found")

        if payload.get("martName") is not None:
            location.mart_name = str(payload["martName"]).strip()
        if payload.get("area") is not None:
            location.area = str(payload["area"]).strip()
        if payload.get("cityId") or payload.get("city"):
            _apply_city(location, payload.get("cityId"), payload.get("city"))
        if "lat" in payload:
            location.lat = parse_optional_float(payload["lat"])
        if "lng" in payload:
            location.lng = parse_optional_float(payload["lng"])
        if "radiusMeters" in payload:
            location.radius_meters = parse_optional_float(payload["radiusMeters"])

        location.updated_at = utcnow()
        db.session.commit()
        return location

    return run_with_retry(_op)


def delete_location(location_id) -> dict:
    """Hard delete. Journey plans keep their snapshot of the location."""
    def _op():
        begin_exclusive()
        location = get_location(location_id)
        if not location:
            raise NotFoundError("Location not found")
        removed = location.to_dict()
        db.session.delete(location)
        db.session.commit()
        return removed

    return run_with_retry(_op)


# -------- products --------

def list_products() -> list[Product]:
    return db.session.query(Product).order_by(Product.created_at.asc(), Product.id.asc()).all()


def create_product(payload: dict) -> Product:
    required = ["id", "name", "description", "brandName"]
    if any(not payload.get(f) for f in required) or payload.get("quantity") is None or payload.get("weight") is None:
        raise ValidationError("All product fields are required")

    product_id = str(payload["id"]).strip()

    def _op():
        begin_exclusive()
        if db.session.get(Product, product_id):
            raise ConflictError("Product id already exists")
        product = Product(
            id=product_id,
            name=str(payload["name"]).strip(),
            description=str(payload["description"]).strip(),
            brand_name=str(payload["brandName"]).strip(),
            quantity=parse_optional_float(payload["quantity"]),
            weight=parse_optional_float(payload["weight"]),
        )
        db.session.add(product)
        db.session.commit()
        return product

    return run_with_retry(_op)
