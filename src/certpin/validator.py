import logging
from datetime import datetime
from typing import Union

from . import constants, util
from .anchors import TrustAnchorSet
from .certificate import IntermediateCertificate, RootCertificate, ServerCertificate
from .evaluator import TrustEvaluator
from .exceptions import MalformedRequest, ValidationFailure
from .models import ValidationRequest, ValidationResult, parse_request
from .policy import select_policy

__module__ = "certpin.validator"

logger = logging.getLogger(__name__)


def evaluate(request: ValidationRequest, now: datetime = None) -> ValidationResult:
    """Run the pinning pipeline for one request.

    Every failure inside the pipeline, including anything the crypto
    libraries raise, comes back as an invalid ValidationResult. Only a request
    that is not a ValidationRequest raises (MalformedRequest).
    """
    if not isinstance(request, ValidationRequest):
        raise MalformedRequest(
            details=[
                f"request of type {type(request)} not supported, ValidationRequest expected"
            ]
        )
    policy = select_policy(request.policy, request.domain)
    try:
        root = RootCertificate(util.normalise_root_text(request.trusted_root))
        server = ServerCertificate(request.server_cert)
        intermediates = [IntermediateCertificate(der) for der in request.intermediates]
        evaluator = TrustEvaluator(TrustAnchorSet(root), policy, now=now)
        return evaluator.evaluate(server, intermediates)
    except ValidationFailure as err:
        return ValidationResult.failure(err)
    except Exception as ex:  # pylint: disable=broad-except
        logger.debug(ex, exc_info=True)
        return ValidationResult(
            valid=False,
            diagnostic=f"{type(ex).__name__}: {ex}",
            step=constants.STEP_INTERNAL,
        )


def to_boolean(result: ValidationResult, domain: str = None) -> bool:
    if result.valid:
        logger.info(f"certificate for {domain} is anchored to the pinned root")
        return True
    logger.warning(
        f"certificate pinning failed for {domain} at the {result.step} step: {result.diagnostic}"
    )
    return False


def validate_request(request: ValidationRequest, now: datetime = None) -> bool:
    return to_boolean(evaluate(request, now=now), request.domain)


def validate(
    server_cert: bytes,
    trusted_root: str,
    domain: str,
    policy: str = constants.DEFAULT_POLICY,
    intermediates: Union[list[bytes], None] = None,
    now: datetime = None,
) -> bool:
    """True only when ``server_cert`` chains to ``trusted_root`` and, under the
    strict_hostname policy, also matches ``domain``.

    Raises MalformedRequest when an argument is missing or has the wrong type.
    """
    request = parse_request(
        {
            "server_cert": server_cert,
            "trusted_root": trusted_root,
            "domain": domain,
            "policy": policy,
            "intermediates": intermediates or [],
        }
    )
    return validate_request(request, now=now)
