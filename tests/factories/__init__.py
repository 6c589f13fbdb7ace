"""Test data factories for auth workflow testing."""

from .registration_factory import RegistrationRequestFactory, registration_payload

__all__ = [
    "RegistrationRequestFactory",
    "registration_payload"
]
