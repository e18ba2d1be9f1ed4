"""Identity bounded context — one-time codes, login, and contact binding.

Issues and verifies one-time codes over email and mobile channels, and uses
verified codes to sign customers in or bind a new contact address to an
existing account.
"""

from protean.domain import Domain

from identity.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
identity = Domain(name="identity")
