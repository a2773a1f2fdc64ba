"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Monetary columns hold minor units; conversion happens in services only

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.user import User  # noqa: F401
from app.models.offer import Offer  # noqa: F401
from app.models.offer_image import OfferImage  # noqa: F401
from app.models.investment import Investment  # noqa: F401
from app.models.investment_file import InvestmentFile  # noqa: F401
