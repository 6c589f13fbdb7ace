"""
Registration draft factories.
Uses Factory Boy to generate realistic test data with Faker.
"""
import factory
from factory import Faker, LazyFunction
from faker import Faker as FakerInstance

from auth_workflow.schemas.auth_schemas import RegistrationRequest

fake = FakerInstance()

DEFAULT_PASSWORD = "pw12345"


class RegistrationRequestFactory(factory.Factory):
    """Factory for valid registration drafts."""

    class Meta:
        model = RegistrationRequest

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = DEFAULT_PASSWORD
    first_name = Faker('first_name')
    last_name = Faker('last_name')
    phone_number = LazyFunction(lambda: fake.numerify("080########"))
    roles = factory.List(["user"])


def registration_payload(**overrides) -> dict:
    """Wire-format (camelCase) signup body; overrides use wire names and skip validation."""
    payload = RegistrationRequestFactory.build().model_dump(by_alias=True)
    payload.update(overrides)
    return payload
