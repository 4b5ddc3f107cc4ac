"""The admin login form."""

from dataclasses import dataclass

from folio.http.request import Request
from folio.security.csrf import FIELD_NAME
from folio.validation import email, min_length, required, validate

RULES = {
    "email": [
        required("Email is required."),
        email("Please enter a valid email address."),
    ],
    "password": [
        required("Password is required."),
        min_length(8, "Password must be at least 8 characters."),
    ],
}


@dataclass(frozen=True, slots=True)
class Credentials:
    email: str = ""
    password: str = ""
    token: str = ""

    @classmethod
    async def from_request(cls, request: Request) -> "Credentials":
        return cls(
            email=str(await request.get_input("email", "") or "").strip().lower(),
            password=str(await request.get_input("password", "") or ""),
            token=str(await request.get_input(FIELD_NAME, "") or ""),
        )

    def validate(self) -> dict[str, list[str]]:
        errors = validate({"email": self.email, "password": self.password}, RULES).errors
        if not self.token:
            errors["general"] = ["Invalid form submission."]
        return errors

    def to_dict(self) -> dict[str, str]:
        """Form repopulation data. The password is never echoed."""
        return {"email": self.email, "password": "", FIELD_NAME: self.token}
