"""Domain error types shared by services and routes."""


class DomainError(Exception):
    """Base class for domain-level errors."""


class NotFoundError(DomainError):
    """No row matched both the requested id and the current owner.

    Raised for a wrong id and for an id owned by someone else alike, so a
    caller cannot tell the two apart.
    """


class PersistenceError(DomainError):
    """The store failed; the message is safe to show to clients."""


class AuthenticationError(DomainError):
    """Federated login could not produce an internal account."""


CATEGORY_NOT_FOUND = "Categoria não encontrada."
TRANSACTION_NOT_FOUND = "Transação não encontrada."
NOT_AUTHORIZED = "Não autorizado."
