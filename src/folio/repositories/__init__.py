from folio.repositories.messages import MessageRepository

__all__ = ["MessageRepository"]
