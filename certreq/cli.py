"""CLI argument parser for certreq.

Provides the ``certreq`` entry point with subcommands:
- ``create`` — build and sign a CSR from subject/SAN flags and a private key
- ``show``   — decode a PEM CSR and print its subject and SANs
"""

from __future__ import annotations

import argparse
import os
import sys

from .crypto_utils import KeyAlgorithm


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certreq",
        description="certreq — build PKCS#10 certificate signing requests.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- create ---
    create_parser = subparsers.add_parser("create", help="Build and sign a CSR")
    create_parser.add_argument(
        "--private-key", required=True,
        help="Path to the requester's private key (PEM or OpenSSH)",
    )
    create_parser.add_argument(
        "--key-algorithm", default=None,
        choices=[a.value for a in KeyAlgorithm],
        type=str.upper,
        help="Declared key algorithm. Inferred from the key if omitted",
    )
    create_parser.add_argument(
        "--passphrase-file", default=None,
        help="File containing the passphrase of an encrypted private key",
    )

    subject = create_parser.add_argument_group("subject")
    subject.add_argument("--common-name", default="", help="Subject common name (CN)")
    subject.add_argument("--organization", action="append", default=[], help="Organization (O). Repeatable.")
    subject.add_argument("--organizational-unit", action="append", default=[], help="Organizational unit (OU). Repeatable.")
    subject.add_argument("--street-address", action="append", default=[], help="Street address. Repeatable.")
    subject.add_argument("--locality", action="append", default=[], help="Locality (L). Repeatable.")
    subject.add_argument("--province", action="append", default=[], help="State or province (ST). Repeatable.")
    subject.add_argument("--country", action="append", default=[], help="Country (C). Repeatable.")
    subject.add_argument("--postal-code", action="append", default=[], help="Postal code. Repeatable.")
    subject.add_argument("--serial-number", default="", help="Subject serialNumber attribute")

    san = create_parser.add_argument_group("subject alternative names")
    san.add_argument("--dns-name", action="append", default=[], help="DNS name SAN. Repeatable.")
    san.add_argument("--ip-address", action="append", default=[], help="IP address SAN (IPv4 or IPv6). Repeatable.")
    san.add_argument("--uri", action="append", default=[], help="URI SAN (e.g., spiffe://domain/workload). Repeatable.")

    create_parser.add_argument("--out", default=None, help="Write the PEM CSR here (default: stdout)")
    create_parser.add_argument("--der-out", default=None, help="Also write the DER CSR here")
    create_parser.add_argument(
        "--force", action="store_true",
        help="Overwrite existing output files without confirmation",
    )
    create_parser.add_argument("--log-file", default=None, help="Log file path")

    # --- show ---
    show_parser = subparsers.add_parser("show", help="Decode a PEM CSR")
    show_parser.add_argument("--csr", required=True, help="CSR file (PEM)")
    show_parser.add_argument("--log-file", default=None, help="Log file path")

    return parser


def validate_create_args(args: argparse.Namespace) -> list[str]:
    """Validate arguments for create. Returns a list of error messages (empty = OK)."""
    errors: list[str] = []

    for attr, label in [
        ("private_key", "--private-key"),
        ("passphrase_file", "--passphrase-file"),
    ]:
        path = getattr(args, attr, None)
        if path and not os.path.isfile(path):
            errors.append(f"{label} file does not exist: {path}")
        elif path and not os.access(path, os.R_OK):
            errors.append(f"{label} file is not readable: {path}")

    if not args.force:
        for path in (args.out, args.der_out):
            if path and os.path.exists(path):
                errors.append(f"{path} already exists. Use --force to overwrite.")

    if args.out and args.der_out and os.path.abspath(args.out) == os.path.abspath(args.der_out):
        errors.append("--out and --der-out must be different files.")

    return errors


def read_passphrase(path: str) -> bytes:
    """Read passphrase from file, stripping trailing newline."""
    with open(path, "rb") as f:
        data = f.read()
    return data.rstrip(b"\r\n")


def _write_file(path: str, data: bytes) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``certreq`` CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "create":
        return _handle_create(args)
    elif args.command == "show":
        return _handle_show(args)

    return 0


def _handle_create(args: argparse.Namespace) -> int:
    from .logger import setup_logging
    from .csr import build_csr
    from .errors import CertRequestError
    from .san import SubjectAltNames
    from .subject import SubjectAttributes

    logger = setup_logging(args.log_file)

    errors = validate_create_args(args)
    if errors:
        for err in errors:
            logger.error(err)
            print(f"Error: {err}", file=sys.stderr)
        return 1

    subject = SubjectAttributes(
        common_name=args.common_name,
        organization=args.organization,
        organizational_unit=args.organizational_unit,
        street_address=args.street_address,
        locality=args.locality,
        province=args.province,
        country=args.country,
        postal_code=args.postal_code,
        serial_number=args.serial_number,
    )

    try:
        with open(args.private_key, "rb") as f:
            key_pem = f.read()
        passphrase = read_passphrase(args.passphrase_file) if args.passphrase_file else None

        sans = SubjectAltNames.from_strings(args.dns_name, args.ip_address, args.uri)
        request = build_csr(
            subject,
            sans,
            key_pem,
            key_algorithm=args.key_algorithm,
            passphrase=passphrase,
            logger=logger,
        )
    except (CertRequestError, OSError) as exc:
        logger.error("CSR creation failed: %s", exc)
        print(f"Error: CSR creation failed: {exc}", file=sys.stderr)
        return 1

    written: list[str] = []
    try:
        if args.der_out:
            _write_file(args.der_out, request.der)
            written.append(args.der_out)
            logger.info("DER CSR saved to %s", os.path.abspath(args.der_out))

        if args.out:
            _write_file(args.out, request.pem.encode("ascii"))
            logger.info("PEM CSR saved to %s", os.path.abspath(args.out))
    except OSError as exc:
        for path in written:
            os.remove(path)
        logger.error("Failed to write CSR: %s", exc)
        print(f"Error: Failed to write CSR: {exc}", file=sys.stderr)
        return 1

    if not args.out:
        sys.stdout.write(request.pem)

    return 0


def _handle_show(args: argparse.Namespace) -> int:
    from .logger import setup_logging
    from .crypto_utils import public_key_pem
    from .csr import load_csr, verify_csr
    from .san import sans_from_extensions
    from .subject import subject_from_name

    logger = setup_logging(getattr(args, "log_file", None))

    try:
        with open(args.csr, "rb") as f:
            csr = load_csr(f.read())
    except (OSError, ValueError) as exc:
        logger.error("Failed to load CSR: %s", exc)
        print(f"Error: Failed to load CSR: {exc}", file=sys.stderr)
        return 1

    subject = subject_from_name(csr.subject)
    sans = sans_from_extensions(csr.extensions)

    print(f"Subject: {csr.subject.rfc4514_string()}")
    print(public_key_pem(csr.public_key()), end="")
    if subject.serial_number:
        print(f"Subject serial number: {subject.serial_number}")
    for dns in sans.dns_names:
        print(f"DNS: {dns}")
    for ip_addr in sans.ip_addresses:
        print(f"IP: {ip_addr}")
    for uri in sans.uris:
        print(f"URI: {uri}")

    if not verify_csr(csr):
        logger.error("CSR signature is INVALID: %s", args.csr)
        print("Signature: INVALID", file=sys.stderr)
        return 1

    print("Signature: valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
