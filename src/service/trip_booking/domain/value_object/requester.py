import attrs

from src.service.trip_booking.domain.value_object.contact_person import ContactPerson


@attrs.frozen
class Requester:
    sub: str
    username: str = ''
    issuer: str = ''
    contact_person: ContactPerson = ContactPerson()

    @property
    def user_pool_id(self) -> str:
        # issuer looks like https://cognito-idp.{region}.amazonaws.com/{user_pool_id}
        return self.issuer.rstrip('/').rsplit('/', 1)[-1]

    def with_profile(self, *, name: str, phone: str, email: str) -> 'Requester':
        """Overlay provider attributes; empty values keep what the token claims said."""
        current = self.contact_person
        return attrs.evolve(
            self,
            contact_person=ContactPerson(
                name=name or current.name,
                phone=phone or current.phone,
                email=email or current.email,
            ),
        )
