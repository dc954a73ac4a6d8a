import base64
import binascii
import ipaddress
import logging
from binascii import hexlify
from datetime import datetime, timezone
from ssl import PEM_cert_to_DER_cert
from typing import Union

import validators
from cryptography.exceptions import InvalidSignature
from cryptography.x509 import (
    Certificate,
    DNSName,
    IPAddress,
    Name,
    SubjectAlternativeName,
    extensions,
)

from . import constants
from .exceptions import DecodeError

__module__ = "certpin.util"

logger = logging.getLogger(__name__)


def force_str(s, encoding="utf-8", errors="strict") -> str:
    if isinstance(s, str):
        return s
    if isinstance(s, (bytes, bytearray, memoryview)):
        return bytes(s).decode(encoding, errors)
    return str(s)


def normalise_root_text(trusted_root: str) -> bytes:
    """Strip PEM armor and line breaks from the trusted root text, then base64
    decode what remains into DER bytes.

    Raises DecodeError when nothing is left or the remainder is not base64.
    """
    if not isinstance(trusted_root, str):
        raise DecodeError(
            f"trusted root of type {type(trusted_root)} not supported, str expected"
        )
    cleaned = (
        trusted_root.replace(constants.PEM_HEADER, "")
        .replace(constants.PEM_FOOTER, "")
        .replace("\n", "")
        .replace("\r", "")
        .strip()
    )
    if not cleaned:
        raise DecodeError("trusted root is empty once PEM armor is removed")
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as err:
        raise DecodeError(f"Failed to decode base64 root certificate: {err}") from err


def pem_or_der_to_der(data: bytes) -> bytes:
    if constants.PEM_HEADER.encode() in data:
        return PEM_cert_to_DER_cert(force_str(data).strip())
    return data


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_self_signed(cert: Certificate) -> bool:
    if cert.issuer != cert.subject:
        return False
    try:
        cert.verify_directly_issued_by(cert)
    except (ValueError, TypeError, InvalidSignature) as ex:
        logger.debug(ex, exc_info=True)
        return False
    return True


def get_san(cert: Certificate) -> list:
    san = []
    try:
        san = cert.extensions.get_extension_for_class(
            SubjectAlternativeName
        ).value.get_values_for_type(DNSName)
    except extensions.ExtensionNotFound as ex:
        logger.debug(ex, stack_info=True)
    return san


def get_san_ip_addresses(cert: Certificate) -> list:
    addresses = []
    try:
        addresses = cert.extensions.get_extension_for_class(
            SubjectAlternativeName
        ).value.get_values_for_type(IPAddress)
    except extensions.ExtensionNotFound as ex:
        logger.debug(ex, stack_info=True)
    return addresses


def get_basic_constraints(cert: Certificate) -> tuple[bool, int]:
    basic_constraints = None
    try:
        basic_constraints = cert.extensions.get_extension_for_class(
            extensions.BasicConstraints
        ).value
    except extensions.ExtensionNotFound as ex:
        logger.debug(ex, stack_info=True)
    if not isinstance(basic_constraints, extensions.BasicConstraints):
        return None, None
    return basic_constraints.ca, basic_constraints.path_length


def get_ski_aki(cert: Certificate) -> tuple[str, str]:
    ski = None
    aki = None
    try:
        ski = hexlify(
            cert.extensions.get_extension_for_class(
                extensions.SubjectKeyIdentifier
            ).value.digest
        ).decode("utf-8")
    except extensions.ExtensionNotFound as ex:
        logger.debug(ex, stack_info=True)
    try:
        key_identifier = cert.extensions.get_extension_for_class(
            extensions.AuthorityKeyIdentifier
        ).value.key_identifier
        if key_identifier:
            aki = hexlify(key_identifier).decode("utf-8")
    except extensions.ExtensionNotFound as ex:
        logger.debug(ex, stack_info=True)

    return ski, aki


def from_subject(subject: Name, field: str = "commonName") -> Union[str, None]:
    for fields in subject:
        current = str(fields.oid)
        if field in current:
            return fields.value
    return None


def match_name(pattern: str, host: str) -> bool:
    pattern = pattern.strip().rstrip(".").lower()
    if pattern.startswith("*."):
        suffix = pattern[2:]
        if validators.domain(suffix) is not True:
            return False
        if not host.endswith(f".{suffix}"):
            return False
        # remove suffix, only subdomain remains
        subdomain = host[: -len(suffix) - 1]
        # a wildcard covers exactly one label
        return bool(subdomain) and "." not in subdomain
    return pattern == host


def match_hostname(host: str, cert: Certificate) -> bool:
    if not isinstance(host, str):
        raise ValueError("invalid host provided")
    if not isinstance(cert, Certificate):
        raise ValueError("invalid Certificate provided")
    host = host.strip().rstrip(".").lower()
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        address = None
    if address is not None:
        return address in get_san_ip_addresses(cert)
    if not host or any(char.isspace() for char in host):
        raise ValueError(f"provided an invalid host {host!r}")
    names = get_san(cert)
    if not names:
        # legacy certificates without a dNSName carry the host in the subject
        common_name = from_subject(cert.subject)
        names = [common_name] if common_name else []
    return any(match_name(name, host) for name in names)


def date_diff(comparer: datetime, now: datetime = None) -> str:
    interval = as_utc(comparer) - as_utc(now or utcnow())
    if interval.days < -1:
        return f"Expired {int(abs(interval.days))} days ago"
    if interval.days == -1:
        return "Expired yesterday"
    if interval.days == 0:
        return "Expires today"
    if interval.days == 1:
        return "Expires tomorrow"
    if interval.days > 365:
        return (
            f"Expires in {interval.days} days ({int(round(interval.days/365))} years)"
        )
    return f"Expires in {interval.days} days"
