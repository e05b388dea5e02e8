from listing_flow.models.base import Base  # noqa: F401

from listing_flow.models.listing import Listing  # noqa: F401
from listing_flow.models.service_settings import ServiceSettings  # noqa: F401
from listing_flow.models.review_incentive_settings import ReviewIncentiveSettings  # noqa: F401
