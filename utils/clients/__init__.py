# Clients subpackage - External service clients
from .anthropic import call_anthropic_api_with_retry, extract_text, get_anthropic_client
from .email import send_email, describe_email_config

__all__ = [
    "call_anthropic_api_with_retry",
    "extract_text",
    "get_anthropic_client",
    "send_email",
    "describe_email_config",
]
