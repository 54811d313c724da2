from services.booking.domain.entity import Booking
from services.booking.domain.exception import BookingNotFoundError
from services.booking.domain.repository import BookingRepository
from services.shared.domain import DomainEventPublisher


class ChauffeurAssignmentService:
    """運転手の割り当て・解除のユースケース"""

    def __init__(
        self, repository: BookingRepository, event_publisher: DomainEventPublisher
    ) -> None:
        self._repository = repository
        self._event_publisher = event_publisher

    def assign(
        self,
        booking_id: str,
        chauffeur_id: str,
        fleet_owner_id: str,
        assigned_by: str,
    ) -> Booking:
        booking = self._get(booking_id)
        expected_status = booking.status
        booking.assign_chauffeur(chauffeur_id, fleet_owner_id, assigned_by)
        events = booking.flush_domain_events()
        if events:
            self._repository.update(booking, expected_status=expected_status)
            self._event_publisher.publish(events)
        return booking

    def unassign(
        self,
        booking_id: str,
        fleet_owner_id: str,
        unassigned_by: str,
        reason: str | None = None,
    ) -> Booking:
        booking = self._get(booking_id)
        expected_status = booking.status
        booking.unassign_chauffeur(fleet_owner_id, unassigned_by, reason)
        self._repository.update(booking, expected_status=expected_status)
        self._event_publisher.publish(booking.flush_domain_events())
        return booking

    def _get(self, booking_id: str) -> Booking:
        booking = self._repository.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking
