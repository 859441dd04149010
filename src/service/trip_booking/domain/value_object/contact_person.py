import attrs


@attrs.frozen
class ContactPerson:
    """Requester contact snapshot, copied onto every transaction and ticket."""

    name: str = ''
    phone: str = ''
    email: str = ''
