"""
Domain Errors

Every rule violation raised by the domain apps derives from ``DomainError``.
Each family carries the HTTP-equivalent status code the API layer answers
with, so services never import anything from the web stack.
"""


class DomainError(Exception):
    """Base class for all domain errors"""

    status_code = 400
    default_message = "Domain rule violated."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Stable machine-readable error code (the class name)"""
        return self.__class__.__name__


# ===== Families =====

class ValidationFailed(DomainError):
    """Bad input shape or range. Never retried."""
    status_code = 400


class NotFound(DomainError):
    """A referenced entity does not exist."""
    status_code = 404


class PermissionDenied(DomainError):
    """The acting user may not perform this operation."""
    status_code = 403


class Conflict(DomainError):
    """The operation clashes with the current state."""
    status_code = 409


class IntegrationError(DomainError):
    """An external collaborator (payment gateway) failed."""
    status_code = 502


# ===== Validation =====

class InvalidDateRange(ValidationFailed):
    default_message = "Dates cannot be in the past and the end date must not precede the start date."


class InvalidRating(ValidationFailed):
    default_message = "Rating must be an integer between 1 and 5."


class InvalidReviewType(ValidationFailed):
    default_message = "This review type is not available to the reviewer."


class InvalidCheckoutAmount(ValidationFailed):
    default_message = "Checkout amount must equal the booking total."


class InvalidPayoutAmount(ValidationFailed):
    default_message = "Payout amount must be positive."


class InvalidWebhookPayload(ValidationFailed):
    default_message = "Webhook payload is not valid JSON."


class InvalidSignature(ValidationFailed):
    default_message = "Webhook signature verification failed."


# ===== Not found =====

class ToolNotFound(NotFound):
    default_message = "Tool not found."


class RenterNotFound(NotFound):
    default_message = "Renter not found."


class UserNotFound(NotFound):
    default_message = "User not found."


class BookingNotFound(NotFound):
    default_message = "Booking not found."


class ReviewNotFound(NotFound):
    default_message = "Review not found."


class ReportNotFound(NotFound):
    default_message = "Report not found."


# ===== Permission =====

class NotBookingParticipant(PermissionDenied):
    default_message = "Only the renter or the owner of the booking may do this."


class NotReviewAuthor(PermissionDenied):
    default_message = "Only the original reviewer may update a review."


# ===== Conflict =====

class OverlapConflict(Conflict):
    default_message = "Tool is already booked for these dates."


class DuplicateReview(Conflict):
    default_message = "A review of this type already exists for the booking."


class PaymentAlreadyCompleted(Conflict):
    default_message = "Booking is already paid."


class DepositNotRequired(Conflict):
    default_message = "No deposit required or already paid."


class BookingNotComplete(Conflict):
    default_message = "Booking must be completed to leave a review."


class InvalidTransition(Conflict):
    default_message = "Booking cannot move to the requested state."


class ConditionAlreadyReported(Conflict):
    default_message = "Condition report already submitted."


class InsufficientBalance(Conflict):
    default_message = "Insufficient wallet balance."


class SubscriptionAlreadyActive(Conflict):
    default_message = "User already has an active Pro subscription."


class SubscriptionNotActive(Conflict):
    default_message = "User does not have an active Pro subscription."


# ===== Integration =====

class PaymentProcessingError(IntegrationError):
    default_message = "Payment gateway request failed."
