import hashlib
import logging
from datetime import datetime
from typing import Union

from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from cryptography.x509 import Certificate, load_der_x509_certificate
from OpenSSL.crypto import X509

from . import util
from .exceptions import CertificateFormatError

__module__ = "certpin.certificate"

logger = logging.getLogger(__name__)


class BaseCertificate:
    """A decoded X.509 certificate.

    Only the DER bytes are kept, every property is derived from them so an
    instance can not be altered once it is built.
    """

    _der: bytes

    def __init__(self, der: bytes) -> None:
        if not isinstance(der, (bytes, bytearray, memoryview)):
            raise CertificateFormatError(
                f"certificate of type {type(der)} not supported, DER bytes expected"
            )
        der = bytes(der)
        if not der:
            raise CertificateFormatError(
                f"Failed to create {self.label} certificate from empty data"
            )
        try:
            load_der_x509_certificate(der)
        except ValueError as err:
            raise CertificateFormatError(
                f"Failed to create {self.label} certificate from data: {err}"
            ) from err
        self._der = der

    @property
    def label(self) -> str:
        return "x509"

    @property
    def der(self) -> bytes:
        return self._der

    @property
    def certificate(self) -> Certificate:
        return load_der_x509_certificate(self._der)

    @property
    def x509(self) -> X509:
        return X509.from_cryptography(self.certificate)

    @property
    def version(self) -> int:
        return self.certificate.version.value

    @property
    def subject(self) -> str:
        return self.certificate.subject.rfc4514_string()

    @property
    def subject_common_name(self) -> Union[str, None]:
        return util.from_subject(self.certificate.subject)

    @property
    def issuer(self) -> str:
        return self.certificate.issuer.rfc4514_string()

    @property
    def issuer_common_name(self) -> Union[str, None]:
        return util.from_subject(self.certificate.issuer)

    @property
    def serial_number_hex(self) -> str:
        return "{0:#0{1}x}".format(  # pylint: disable=consider-using-f-string
            self.certificate.serial_number, 4
        )

    @property
    def signature_algorithm(self) -> Union[str, None]:
        return (
            self.certificate.signature_algorithm_oid._name  # pylint: disable=protected-access
        )

    @property
    def public_key(self):
        return self.certificate.public_key()

    @property
    def public_key_type(self) -> Union[str, None]:
        public_key = self.public_key
        if isinstance(public_key, rsa.RSAPublicKey):
            return "RSA"
        if isinstance(public_key, dsa.DSAPublicKey):
            return "DSA"
        if isinstance(public_key, ec.EllipticCurvePublicKey):
            return "EC"
        if isinstance(public_key, ed25519.Ed25519PublicKey):
            return "Ed25519"
        if isinstance(public_key, ed448.Ed448PublicKey):
            return "Ed448"
        return None

    @property
    def public_key_size(self) -> Union[int, None]:
        return getattr(self.public_key, "key_size", None)

    @property
    def public_key_curve(self) -> Union[str, None]:
        if isinstance(self.public_key, ec.EllipticCurvePublicKey):
            return self.public_key.curve.name
        return None

    @property
    def sha256_fingerprint(self) -> str:
        return hashlib.sha256(self._der).hexdigest()

    @property
    def sha1_fingerprint(self) -> str:
        return hashlib.sha1(self._der).hexdigest()

    @property
    def spki_fingerprint(self) -> str:
        return hashlib.sha256(
            self.public_key.public_bytes(
                Encoding.DER, PublicFormat.SubjectPublicKeyInfo
            )
        ).hexdigest()

    @property
    def san(self) -> list[str]:
        return util.get_san(self.certificate)

    @property
    def san_ip_addresses(self) -> list[str]:
        return [str(ip) for ip in util.get_san_ip_addresses(self.certificate)]

    @property
    def not_before(self) -> datetime:
        return self.certificate.not_valid_before_utc

    @property
    def not_after(self) -> datetime:
        return self.certificate.not_valid_after_utc

    @property
    def basic_constraints_ca(self) -> Union[bool, None]:
        ca, _ = util.get_basic_constraints(self.certificate)
        return ca

    @property
    def basic_constraints_path_length(self) -> Union[int, None]:
        _, path_length = util.get_basic_constraints(self.certificate)
        return path_length

    @property
    def subject_key_identifier(self) -> Union[str, None]:
        ski, _ = util.get_ski_aki(self.certificate)
        return ski

    @property
    def authority_key_identifier(self) -> Union[str, None]:
        _, aki = util.get_ski_aki(self.certificate)
        return aki

    @property
    def is_self_signed(self) -> bool:
        return util.is_self_signed(self.certificate)

    def valid_at(self, when: datetime) -> bool:
        when = util.as_utc(when)
        return self.not_before <= when <= self.not_after

    def expiry_status(self, now: datetime = None) -> str:
        return util.date_diff(self.not_after, now)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BaseCertificate):
            return NotImplemented
        return self._der == other.der

    def __hash__(self) -> int:
        return hash(self._der)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.subject} sha256={self.sha256_fingerprint}>"

    def to_dict(self) -> dict:
        return {
            "type": self.label,
            "version": self.version,
            "subject": self.subject,
            "subject_common_name": self.subject_common_name,
            "issuer": self.issuer,
            "issuer_common_name": self.issuer_common_name,
            "serial_number_hex": self.serial_number_hex,
            "signature_algorithm": self.signature_algorithm,
            "public_key_type": self.public_key_type,
            "public_key_size": self.public_key_size,
            "public_key_curve": self.public_key_curve,
            "sha256_fingerprint": self.sha256_fingerprint,
            "sha1_fingerprint": self.sha1_fingerprint,
            "spki_fingerprint": self.spki_fingerprint,
            "san": self.san,
            "san_ip_addresses": self.san_ip_addresses,
            "not_before": self.not_before.isoformat(),
            "not_after": self.not_after.isoformat(),
            "basic_constraints_ca": self.basic_constraints_ca,
            "basic_constraints_path_length": self.basic_constraints_path_length,
            "subject_key_identifier": self.subject_key_identifier,
            "authority_key_identifier": self.authority_key_identifier,
            "is_self_signed": self.is_self_signed,
        }


class ServerCertificate(BaseCertificate):
    @property
    def label(self) -> str:
        return "server"


class RootCertificate(BaseCertificate):
    @property
    def label(self) -> str:
        return "root"


class IntermediateCertificate(BaseCertificate):
    @property
    def label(self) -> str:
        return "intermediate"
