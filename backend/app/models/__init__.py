from app.models.profile import Profile
from app.models.bus import Bus
from app.models.booking import Booking

__all__ = ["Profile", "Bus", "Booking"]
