from .booking_events import BookingCancelledEvent as BookingCancelledEvent
from .booking_events import (
    BookingChauffeurAssignedEvent as BookingChauffeurAssignedEvent,
)
from .booking_events import (
    BookingChauffeurUnassignedEvent as BookingChauffeurUnassignedEvent,
)
from .booking_events import BookingConfirmedEvent as BookingConfirmedEvent
from .booking_events import BookingCreatedEvent as BookingCreatedEvent
from .booking_events import BookingEvent as BookingEvent
from .booking_events import BookingLegEndedEvent as BookingLegEndedEvent
from .booking_events import BookingLegEndReminderEvent as BookingLegEndReminderEvent
from .booking_events import BookingLegEvent as BookingLegEvent
from .booking_events import BookingLegStartedEvent as BookingLegStartedEvent
from .booking_events import (
    BookingLegStartReminderEvent as BookingLegStartReminderEvent,
)
