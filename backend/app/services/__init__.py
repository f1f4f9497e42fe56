"""
Services package.
Calculator logic and persistence of user inputs.

- loan/mortgage/tax/interest/chit/dti/investment/tvm/savings/rental services: stateless calculators
- export_service: CSV reports
- contact_service: contact form (logged only)
- SessionStore: calculator sessions, preferences, saved scenarios
"""
from backend.app.services.session_store import SessionStore

__all__ = [
    "SessionStore",
    ]
