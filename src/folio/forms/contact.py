"""The public contact form."""

from dataclasses import asdict, dataclass

from folio.http.request import Request
from folio.validation import email, max_length, required, validate

RULES = {
    "name": [
        required("Name is required."),
        max_length(100, "Name is too long (maximum 100 characters)."),
    ],
    "email": [
        required("Email is required."),
        email("Please enter a valid email address."),
    ],
    "subject": [
        required("Subject is required."),
        max_length(200, "Subject is too long (maximum 200 characters)."),
    ],
    "message": [
        required("Message is required."),
        max_length(3000, "Message is too long (maximum 3000 characters)."),
    ],
}


@dataclass(frozen=True, slots=True)
class ContactForm:
    """Submitted contact details, trimmed.

    Values are stored as typed; templates escape them on output.
    """

    name: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""

    @classmethod
    async def from_request(cls, request: Request) -> "ContactForm":
        async def field(key: str) -> str:
            return str(await request.get_input(key, "") or "").strip()

        return cls(
            name=await field("name"),
            email=(await field("email")).lower(),
            subject=await field("subject"),
            message=await field("message"),
        )

    def validate(self) -> dict[str, list[str]]:
        """Field name to messages; empty when the form is valid."""
        return validate(self.to_dict(), RULES).errors

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
