import logging
from datetime import datetime
from typing import Union

from OpenSSL.crypto import X509StoreContext, X509StoreContextError

from . import constants, util
from .anchors import TrustAnchorSet
from .certificate import IntermediateCertificate, ServerCertificate
from .exceptions import (
    VALIDATION_ERROR_EXPIRED,
    VALIDATION_ERROR_HOSTNAME_MISMATCH,
    VALIDATION_ERROR_NOT_YET_VALID,
    X509_V_ERR_CERT_HAS_EXPIRED,
    X509_V_ERR_CERT_NOT_YET_VALID,
    ValidationError,
    ValidationFailure,
)
from .models import ValidationResult
from .policy import ValidationPolicy

__module__ = "certpin.evaluator"

logger = logging.getLogger(__name__)


class TrustEvaluator:
    """Path validation of a server certificate restricted to a single pinned
    anchor.

    Steps run in order and the first failure ends the evaluation:

    1. chain, signatures from the server certificate through any supplied
       intermediates must lead to the pinned root
    2. validity, every certificate on that path must be valid at ``now``
    3. hostname, only for policies that check it
    """

    anchors: TrustAnchorSet
    policy: ValidationPolicy
    now: datetime

    def __init__(
        self,
        anchors: TrustAnchorSet,
        policy: ValidationPolicy,
        now: datetime = None,
    ) -> None:
        if not isinstance(anchors, TrustAnchorSet):
            raise TypeError(
                f"provided an invalid type {type(anchors)} for anchors, expected TrustAnchorSet"
            )
        self.anchors = anchors
        self.policy = policy
        self.now = util.as_utc(now) if now else util.utcnow()

    def evaluate(
        self,
        server: ServerCertificate,
        intermediates: Union[list[IntermediateCertificate], None] = None,
    ) -> ValidationResult:
        try:
            self.verify_chain(server, intermediates or [])
            if self.policy.checks_hostname:
                self.verify_hostname(server)
        except ValidationFailure as err:
            logger.debug(f"{err.step} step failed for {server.subject}: {err}")
            return ValidationResult.failure(err)
        logger.debug(
            f"{server.subject} is anchored to {self.anchors.root.subject} under {self.policy.name}"
        )
        return ValidationResult(valid=True)

    def verify_chain(
        self,
        server: ServerCertificate,
        intermediates: list[IntermediateCertificate],
    ) -> None:
        store = self.anchors.build_store(self.now)
        context = X509StoreContext(
            store,
            server.x509,
            chain=[cert.x509 for cert in intermediates] or None,
        )
        try:
            context.verify_certificate()
        except X509StoreContextError as err:
            openssl_errno, depth, reason = err.errors[0], err.errors[1], err.errors[2]
            logger.debug(f"openssl errno {openssl_errno} at depth {depth}: {reason}")
            if openssl_errno in constants.OPENSSL_TIME_ERRNOS:
                raise ValidationError(
                    self._validity_message(openssl_errno, depth, err.certificate),
                    openssl_errno=openssl_errno,
                    step=constants.STEP_VALIDITY,
                ) from err
            raise ValidationError(
                f"Trust evaluation failed at depth {depth}: {reason}",
                openssl_errno=openssl_errno,
                step=constants.STEP_CHAIN,
            ) from err

    def verify_hostname(self, server: ServerCertificate) -> None:
        domain = getattr(self.policy, "domain", None)
        try:
            matched = util.match_hostname(domain, server.certificate)
        except ValueError as err:
            raise ValidationError(str(err), step=constants.STEP_HOSTNAME) from err
        if not matched:
            raise ValidationError(
                VALIDATION_ERROR_HOSTNAME_MISMATCH.format(
                    domain=domain,
                    names=", ".join(server.san + server.san_ip_addresses)
                    or server.subject_common_name,
                ),
                step=constants.STEP_HOSTNAME,
            )

    def _validity_message(
        self, openssl_errno: int, depth: int, x509
    ) -> Union[str, None]:
        if openssl_errno not in [
            X509_V_ERR_CERT_NOT_YET_VALID,
            X509_V_ERR_CERT_HAS_EXPIRED,
        ]:
            return None
        certificate = "server" if depth == 0 else "issuing"
        subject = None
        not_before = not_after = None
        if x509 is not None:
            cert = x509.to_cryptography()
            subject = cert.subject.rfc4514_string()
            not_before = cert.not_valid_before_utc.isoformat()
            not_after = cert.not_valid_after_utc.isoformat()
            if cert.subject == self.anchors.root.certificate.subject and depth > 0:
                certificate = "trusted root"
        if openssl_errno == X509_V_ERR_CERT_NOT_YET_VALID:
            return VALIDATION_ERROR_NOT_YET_VALID.format(
                certificate=certificate, subject=subject, not_before=not_before
            )
        return VALIDATION_ERROR_EXPIRED.format(
            certificate=certificate, subject=subject, not_after=not_after
        )
