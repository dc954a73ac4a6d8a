import ipaddress
from datetime import datetime, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)
DOMAIN = "api.example.com"


def make_key():
    return ec.generate_private_key(ec.SECP256R1())


def make_cert(
    common_name: str,
    key,
    issuer_cert=None,
    issuer_key=None,
    ca: bool = False,
    not_before: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
    not_after: datetime = datetime(2034, 1, 1, tzinfo=timezone.utc),
    dns_names: list = None,
    ip_addresses: list = None,
) -> x509.Certificate:
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    issuer = issuer_cert.subject if issuer_cert is not None else subject
    signing_key = issuer_key or key
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(key.public_key()),
            critical=False,
        )
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(
                signing_key.public_key()
            ),
            critical=False,
        )
    )
    if ca:
        builder = builder.add_extension(
            x509.BasicConstraints(ca=True, path_length=None), critical=True
        ).add_extension(
            x509.KeyUsage(
                digital_signature=False,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
    else:
        builder = builder.add_extension(
            x509.BasicConstraints(ca=False, path_length=None), critical=True
        )
    names = [x509.DNSName(name) for name in dns_names or []]
    names += [x509.IPAddress(ipaddress.ip_address(ip)) for ip in ip_addresses or []]
    if names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName(names), critical=False
        )
    return builder.sign(signing_key, hashes.SHA256())


def to_der(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(Encoding.DER)


def to_pem(cert: x509.Certificate) -> str:
    return cert.public_bytes(Encoding.PEM).decode("utf-8")


@pytest.fixture(scope="session")
def root_key():
    return make_key()


@pytest.fixture(scope="session")
def root_cert(root_key):
    return make_cert(
        "Pinned Test Root",
        root_key,
        ca=True,
        not_before=datetime(2020, 1, 1, tzinfo=timezone.utc),
        not_after=datetime(2040, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture(scope="session")
def root_pem(root_cert) -> str:
    return to_pem(root_cert)


@pytest.fixture(scope="session")
def intermediate_key():
    return make_key()


@pytest.fixture(scope="session")
def intermediate_cert(intermediate_key, root_cert, root_key):
    return make_cert(
        "Test Issuing CA",
        intermediate_key,
        issuer_cert=root_cert,
        issuer_key=root_key,
        ca=True,
        not_before=datetime(2022, 1, 1, tzinfo=timezone.utc),
        not_after=datetime(2036, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture(scope="session")
def leaf_key():
    return make_key()


@pytest.fixture(scope="session")
def leaf_cert(leaf_key, root_cert, root_key):
    """Issued directly by the pinned root"""
    return make_cert(
        DOMAIN,
        leaf_key,
        issuer_cert=root_cert,
        issuer_key=root_key,
        dns_names=[DOMAIN, "*.api.example.com"],
        ip_addresses=["10.0.0.1"],
    )


@pytest.fixture(scope="session")
def leaf_der(leaf_cert) -> bytes:
    return to_der(leaf_cert)


@pytest.fixture(scope="session")
def chained_leaf_cert(leaf_key, intermediate_cert, intermediate_key):
    """Issued by the intermediate, which the pinned root issued"""
    return make_cert(
        DOMAIN,
        leaf_key,
        issuer_cert=intermediate_cert,
        issuer_key=intermediate_key,
        dns_names=[DOMAIN],
    )


@pytest.fixture(scope="session")
def other_root_key():
    return make_key()


@pytest.fixture(scope="session")
def other_root_cert(other_root_key):
    return make_cert(
        "Unrelated Root",
        other_root_key,
        ca=True,
        not_before=datetime(2020, 1, 1, tzinfo=timezone.utc),
        not_after=datetime(2040, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture(scope="session")
def impostor_root_cert(other_root_key):
    """Same subject as the pinned root, different key"""
    return make_cert(
        "Pinned Test Root",
        other_root_key,
        ca=True,
        not_before=datetime(2020, 1, 1, tzinfo=timezone.utc),
        not_after=datetime(2040, 1, 1, tzinfo=timezone.utc),
    )
