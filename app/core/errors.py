"""Domain errors raised by the service layer.

Services raise these before mutating anything they would have to undo; the
handlers registered in ``app.main`` map them onto the JSON error envelope.
"""


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(DomainError):
    status_code = 404


class BusinessRuleViolation(DomainError):
    status_code = 400


class InsufficientStock(BusinessRuleViolation):
    pass


class InsufficientBalance(BusinessRuleViolation):
    pass


class InvalidState(BusinessRuleViolation):
    pass


class NotRented(InvalidState):
    pass


class NotInUse(InvalidState):
    pass


class ScopeViolation(DomainError):
    status_code = 403
