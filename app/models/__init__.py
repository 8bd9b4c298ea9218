# Car-wash marketplace: Database Models
# Import all models here for SQLAlchemy discovery

from app.models.profile import Profile                          # noqa
from app.models.vendor_profile import VendorProfile             # noqa
from app.models.vehicle import Vehicle, VehicleType             # noqa
from app.models.service_listing import ServiceListing, ServiceType  # noqa
from app.models.vendor_service_area import VendorServiceArea    # noqa
from app.models.booking import Booking, BookingStatus           # noqa
from app.models.review import Review                            # noqa
