"""
truesign_auth

Verification of Truesign anti-fraud tokens on inbound HTTP requests:
extract the token, decrypt it, run an acceptance policy, and attach the
decoded risk assessment to the request. Framework agnostic, with FastAPI
and Strawberry integrations.
"""

__version__ = "0.1.0"

from .domain.entities import DecryptedToken, detect_schema
from .domain.constants import (
    SchemaVersion,
    VerificationOutcome,
    DEFAULT_HEADER,
    DEFAULT_INJECT_KEY,
    DEFAULT_QUERY_PARAM,
)
from .domain.exceptions import (
    TruesignError,
    ConfigurationError,
    TokenDecryptionError,
)
from .domain.value_objects import EmailInfo, IpAddress, TokenError
from .domain.ports import (
    AcceptancePolicy,
    HttpReply,
    HttpRequest,
    TokenDecryptor,
    TokenExtractor,
)
from .domain import policies

from .adapters.extractors import (
    default_extractor,
    first_of,
    header_extractor,
    query_param_extractor,
)
from .adapters.aes.decryptor import AesTokenDecryptor, decrypt_token, encrypt_token

from .config import VerificationConfig, settings_from_env
from .application.use_cases.verify import VerificationResult, VerifyTokenUseCase
from .integrations.common.hook import TruesignHook, create_hook

__all__ = [
    "__version__",
    # domain core
    "DecryptedToken",
    "EmailInfo",
    "IpAddress",
    "TokenError",
    "SchemaVersion",
    "VerificationOutcome",
    "DEFAULT_HEADER",
    "DEFAULT_INJECT_KEY",
    "DEFAULT_QUERY_PARAM",
    "detect_schema",
    "policies",
    # ports
    "AcceptancePolicy",
    "HttpReply",
    "HttpRequest",
    "TokenDecryptor",
    "TokenExtractor",
    # exceptions
    "TruesignError",
    "ConfigurationError",
    "TokenDecryptionError",
    # adapters
    "default_extractor",
    "first_of",
    "header_extractor",
    "query_param_extractor",
    "AesTokenDecryptor",
    "decrypt_token",
    "encrypt_token",
    # config + use case
    "VerificationConfig",
    "settings_from_env",
    "VerificationResult",
    "VerifyTokenUseCase",
    "TruesignHook",
    "create_hook",
]
