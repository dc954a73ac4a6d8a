import sys
import logging

from . import constants, exceptions
from .anchors import TrustAnchorSet
from .certificate import (
    BaseCertificate,
    IntermediateCertificate,
    RootCertificate,
    ServerCertificate,
)
from .channel import MethodCallHandler
from .evaluator import TrustEvaluator
from .models import PolicyName, ValidationRequest, ValidationResult, parse_request
from .policy import ChainOnly, StrictHostname, ValidationPolicy, select_policy
from .validator import evaluate, validate, validate_request

__version__ = "1.0.0"
__module__ = "certpin"

assert sys.version_info >= (3, 10), "Requires Python 3.10 or newer"
logger = logging.getLogger(__name__)

__all__ = [
    "BaseCertificate",
    "ChainOnly",
    "IntermediateCertificate",
    "MethodCallHandler",
    "PolicyName",
    "RootCertificate",
    "ServerCertificate",
    "StrictHostname",
    "TrustAnchorSet",
    "TrustEvaluator",
    "ValidationPolicy",
    "ValidationRequest",
    "ValidationResult",
    "constants",
    "evaluate",
    "exceptions",
    "parse_request",
    "select_policy",
    "validate",
    "validate_request",
]
