"""Form data objects: read from a request, validate, echo back."""

from folio.forms.contact import ContactForm
from folio.forms.credentials import Credentials

__all__ = ["ContactForm", "Credentials"]
