from .users import User, SessionToken, ROLES, ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_EMPLOYEE
from .reference import City, Location, Product
from .journey_plans import JourneyPlan, PERIOD_TYPES, PERIOD_WEEKLY, PERIOD_MONTHLY
from .sales import SaleRecord

__all__ = [
    'User', 'SessionToken', 'ROLES', 'ROLE_ADMIN', 'ROLE_SUPERVISOR', 'ROLE_EMPLOYEE',
    'City', 'Location', 'Product',
    'JourneyPlan', 'PERIOD_TYPES', 'PERIOD_WEEKLY', 'PERIOD_MONTHLY',
    'SaleRecord',
]
