from pathlib import Path
from setuptools import setup, find_packages

__version__ = "1.0.0"

DEFAULT_REQUIREMENTS = """
cryptography>=42.0
pyOpenSSL>=23.2
pydantic>=2.0
rich
validators
pyyaml"""

try:
    requirements = Path(__file__).with_name("requirements.txt").read_text(encoding="utf8")
except FileNotFoundError:
    requirements = DEFAULT_REQUIREMENTS
install_requires = [
    line.strip()
    for line in requirements.splitlines()
    if line.strip() and not line.strip().startswith("#")
]


setup(
    name="certpin",
    version=__version__,
    description="Validate a server certificate against a single pinned root certificate.",
    classifiers=[
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
    ],
    zip_safe=False,
    include_package_data=True,
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["certpin=certpin.cli.__main__:main"],
    },
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    long_description="""
# certpin

Validate the certificate a server presented against exactly one pinned root
certificate, instead of the platform trust store.

## Basic Usage

`python3 -m pip install -U certpin`

```py
import certpin

is_valid = certpin.validate(
    server_cert=der_bytes,
    trusted_root=pem_text,
    domain="api.example.com",
)
print('Valid' if is_valid else 'Not Valid')
```

On the command-line:

```sh
certpin verify --server-cert server.pem --trusted-root root.pem --domain api.example.com
certpin info server.pem root.pem
```

## Features

- Trust anchor
  - a single caller supplied root, PEM armored or bare base64 text
  - platform trust stores are never consulted
- Policies
  - chain_only; signatures and validity windows only
  - strict_hostname; also match the domain against subjectAltName (commonName when no dNSName is present)
- Untrusted intermediates between the server certificate and the pinned root
- Structured results naming the failed step and the OpenSSL verify error
- Message channel handler for hosts bridging a `validateCertificate` call
    """,
    long_description_content_type="text/markdown",
)
