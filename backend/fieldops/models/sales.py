from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

class SaleRecord(db.Model):
    """
    One recorded sale visit.

    Employee, location and product fields are snapshots taken when the
    sale is recorded. `product_weight` and `total_weight` are never
    recomputed, so rollups stay stable when reference data changes.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_sale_date", "sale_date"),
        db.Index("ix_sales_employee_date", "employee_id", "sale_date"),
        db.Index("ix_sales_location_date", "location_id", "sale_date"),
        db.Index("ix_sales_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    employee_id = db.Column(db.Integer, nullable=False)
    employee_name = db.Column(db.String(255), nullable=True)

    location_id = db.Column(db.Integer, nullable=False)
    location_name = db.Column(db.String(255), nullable=True)

    product_id = db.Column(db.String(64), nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=True)
    product_weight = db.Column(db.Float, nullable=True)

    quantity = db.Column(db.Float, nullable=False)
    total_weight = db.Column(db.Float, nullable=False)

    # Canonical YYYY-MM-DD
    sale_date = db.Column(db.String(10), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "locationId": self.location_id,
            "locationName": self.location_name,
            "productId": self.product_id,
            "productName": self.product_name,
            "productWeight": self.product_weight,
            "quantity": self.quantity,
            "totalWeight": self.total_weight,
            "saleDate": self.sale_date,
            "createdAt": to_utc_z(self.created_at),
        }
