"""
Contact form API endpoint.

- POST /contact: Accept a contact message (logged, not delivered)
"""
from fastapi import APIRouter

from backend.app.schemas.common import MessageResponse
from backend.app.schemas.contact import ContactRequest
from backend.app.services.contact_service import submit_contact

contact_router = APIRouter(prefix="/contact", tags=["Contact"])


@contact_router.post("", response_model=MessageResponse)
async def send_contact_message(request: ContactRequest) -> MessageResponse:
    """
    Submit the contact form.

    All fields are required; the email must be valid (422 otherwise).

    **Example Request**:
    ```json
    {"name": "Asha", "email": "asha@example.com", "subject": "EMI", "message": "Great tool"}
    ```

    **Response**:
    ```json
    {"success": true, "message": "Message sent successfully"}
    ```
    """
    return submit_contact(request)
