"""Error taxonomy for the seller trust subsystem."""


class TrustError(Exception):
    """Base class for every error raised by sellertrust."""


class ValidationFailed(TrustError):
    """Input rejected before anything was written."""


class InvalidDocument(ValidationFailed):
    def __init__(self, reason: str):
        super().__init__(f"Invalid certification document: {reason}")
        self.reason = reason


class DuplicatePolicy(ValidationFailed):
    def __init__(self, category_id: str):
        super().__init__(f"Badge policy already exists for category {category_id}")
        self.category_id = category_id


class InvalidPolicy(ValidationFailed):
    pass


class MissingAuditField(ValidationFailed):
    def __init__(self, field: str):
        super().__init__(f"Audit entry is missing required field: {field}")
        self.field = field


class StateConflict(TrustError):
    """The operation conflicts with the current state of a record."""


class InvalidStateTransition(StateConflict):
    def __init__(self, certification_id: str, current: str, requested: str):
        super().__init__(
            f"Certification {certification_id} cannot move from {current} to {requested}"
        )
        self.certification_id = certification_id
        self.current = current
        self.requested = requested


class AlreadyActive(StateConflict):
    def __init__(self, seller_id: str, subscription_id: str):
        super().__init__(
            f"Seller {seller_id} already has active subscription {subscription_id}"
        )
        self.seller_id = seller_id
        self.subscription_id = subscription_id


class NotFound(TrustError):
    """A referenced record does not exist."""

    kind = "record"

    def __init__(self, identifier: str):
        super().__init__(f"{self.kind} {identifier} not found")
        self.identifier = identifier


class SellerNotFound(NotFound):
    kind = "Seller"


class CategoryNotFound(NotFound):
    kind = "Category"


class CertificationNotFound(NotFound):
    kind = "Certification"


class PolicyNotFound(NotFound):
    kind = "Badge policy for category"


class SubscriptionNotFound(NotFound):
    kind = "Subscription"


class PersistenceFailure(TrustError):
    """Storage rejected a unit of work; nothing from it was applied."""
