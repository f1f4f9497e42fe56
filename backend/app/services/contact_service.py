"""
Contact form handling.

Submissions are logged for the support inbox; nothing is delivered.
"""
from backend.app.config import get_settings
from backend.app.logging_config import get_logger
from backend.app.schemas.common import MessageResponse
from backend.app.schemas.contact import ContactRequest
from backend.app.utils.datetime_utils import utcnow

logger = get_logger(__name__)


def submit_contact(request: ContactRequest) -> MessageResponse:
    logger.info(
        "Contact form submission",
        name=request.name,
        email=request.email,
        subject=request.subject,
        message=request.message,
        recipient=get_settings().CONTACT_RECIPIENT,
        timestamp=utcnow().isoformat(),
        )
    return MessageResponse(success=True, message="Message sent successfully")
