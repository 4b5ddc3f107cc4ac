"""A contact-form message as stored in the ``messages`` table."""

from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Message:
    """One row of ``messages``.

    ``id`` and ``created_at`` are assigned by the database. Content never
    changes after creation; only the read flag does, through the repository.
    """

    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: str
    read: bool = False

    @property
    def is_read(self) -> bool:
        return self.read

    def marked_read(self) -> "Message":
        return replace(self, read=True)

    def marked_unread(self) -> "Message":
        return replace(self, read=False)

    def toggled(self) -> "Message":
        return replace(self, read=not self.read)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
