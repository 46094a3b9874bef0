"""Error taxonomy.

DomainError subclasses describe expected outcomes a client can act on. They
are carried inside ``Err`` and rendered as 400 responses.

InfrastructureError subclasses are faults (database down, broken driver).
They are raised, never retried here, and surface as an opaque 500.
"""

from __future__ import annotations


class DomainError(Exception):
    message: str = "Request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class AlreadyExistsError(DomainError):
    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"User with email {email!r} already exists")


class InvalidCredentialsError(DomainError):
    # Same text for unknown email and wrong password.
    message = "Invalid credentials"

    def __init__(self) -> None:
        super().__init__()


class InfrastructureError(Exception):
    pass


class UserStoreError(InfrastructureError):
    pass
