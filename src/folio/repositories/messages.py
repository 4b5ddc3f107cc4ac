"""Parameterised queries over the ``messages`` table."""

from folio.data.database import Database
from folio.data.errors import DataError
from folio.models.message import Message


# Largest rowid SQLite can store; longer ids in a URL name no message
MAX_ID = 2**63 - 1


def _storable(message_id: int) -> bool:
    return 0 < message_id <= MAX_ID


class MessageRepository:
    """CRUD for contact messages.

    Usage::

        messages = MessageRepository(ctx.database)
        created = await messages.create("Ada", "ada@example.com", "Hi", "Hello!")
        await messages.update_read_status(created.id, True)
    """

    __slots__ = ("_db",)

    def __init__(self, db: Database) -> None:
        self._db = db

    async def count(self) -> int:
        return int(await self._db.fetch_val("SELECT COUNT(*) FROM messages") or 0)

    async def count_unread(self) -> int:
        return int(await self._db.fetch_val("SELECT COUNT(*) FROM messages WHERE read = 0") or 0)

    async def find_all(self) -> list[Message]:
        """All messages, newest first. Ties on ``created_at`` fall back to id."""
        return await self._db.fetch(
            Message, "SELECT * FROM messages ORDER BY created_at DESC, id DESC"
        )

    async def find(self, message_id: int) -> Message | None:
        if not _storable(message_id):
            return None
        return await self._db.fetch_one(Message, "SELECT * FROM messages WHERE id = ?", message_id)

    async def create(self, name: str, email: str, subject: str, message: str) -> Message:
        """Insert a message and return it as stored (id, timestamp, unread)."""
        new_id = await self._db.insert(
            "INSERT INTO messages (name, email, subject, message) VALUES (?, ?, ?, ?)",
            name,
            email,
            subject,
            message,
        )
        created = await self.find(new_id)
        if created is None:
            msg = f"Inserted message {new_id} could not be read back"
            raise DataError(msg)
        return created

    async def update_read_status(self, message_id: int, read: bool) -> bool:
        """Set the read flag. False when no row has that id."""
        if not _storable(message_id):
            return False
        changed = await self._db.execute(
            "UPDATE messages SET read = ? WHERE id = ?", 1 if read else 0, message_id
        )
        return changed > 0

    async def delete(self, message_id: int) -> bool:
        """Delete a message. False when no row has that id."""
        if not _storable(message_id):
            return False
        return await self._db.execute("DELETE FROM messages WHERE id = ?", message_id) > 0
