# Interfaces (Abstract Contracts)
# Adapters implement these interfaces
from .services import EmailService

__all__ = [
    "EmailService",
]
