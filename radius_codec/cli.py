from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Protocol, cast

from radius_codec.config.config import CodecConfig
from radius_codec.config.constants import ENV_CODEC_CONFIG
from radius_codec.exceptions import ConfigValidationError, RadiusCodecError
from radius_codec.radius.codec import RadiusCodec
from radius_codec.radius.packet import RADIUSPacket
from radius_codec.utils.logger import configure, get_logger

logger = get_logger(__name__)


def _load(args: argparse.Namespace) -> tuple[CodecConfig, RadiusCodec]:
    cfg = CodecConfig(args.config)
    configure(level=args.log_level or cfg.get_logging_config()["level"])
    return cfg, RadiusCodec.from_config(cfg)


def _secret(args: argparse.Namespace) -> str:
    secret = args.secret or CodecConfig.get_secret()
    if not secret:
        raise RadiusCodecError(
            "Shared secret required (--secret or RADIUS_CODEC_SECRET)"
        )
    return secret


def _parse_value(text: str) -> bytes:
    if text.startswith("0x"):
        try:
            return bytes.fromhex(text[2:])
        except ValueError as exc:
            raise RadiusCodecError(f"Invalid hex value: {text}") from exc
    return text.encode("utf-8")


def cmd_check_config(args: argparse.Namespace) -> int:
    try:
        issues = CodecConfig(args.config).validate_config()
    except ConfigValidationError as exc:
        issues = exc.details.get("issues") or [str(exc)]
    if issues:
        print("Configuration validation failed:")
        for i in issues:
            print(f"  - {i}")
        return 1
    print("Configuration is valid")
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    _, codec = _load(args)
    raw_hex = sys.stdin.read() if args.data == "-" else args.data
    try:
        data = bytes.fromhex("".join(raw_hex.split()))
    except ValueError as exc:
        print(f"Invalid hex input: {exc}", file=sys.stderr)
        return 1
    packet = codec.decode(data, _secret(args))
    print(json.dumps(packet.to_dict(), indent=2))
    return 0


def cmd_encode(args: argparse.Namespace) -> int:
    _, codec = _load(args)
    try:
        authenticator = (
            bytes.fromhex(args.authenticator)
            if args.authenticator
            else codec.generate_authenticator()
        )
    except ValueError as exc:
        print(f"Invalid authenticator: {exc}", file=sys.stderr)
        return 1
    packet = RADIUSPacket(
        args.code, args.identifier, authenticator, dictionary=codec.dictionary
    )
    for item in args.attr or []:
        name, sep, value = item.partition("=")
        if not sep:
            print(f"Attribute must be NAME=VALUE: {item}", file=sys.stderr)
            return 1
        packet.add_attribute(name.strip(), _parse_value(value))
    print(codec.encode(packet, _secret(args)).hex())
    return 0


def cmd_authenticator(args: argparse.Namespace) -> int:
    print(RadiusCodec.generate_authenticator().hex())
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="radius-codec", description="Encode and decode RADIUS packets"
    )
    p.add_argument(
        "--config",
        "-c",
        default=os.environ.get(ENV_CODEC_CONFIG),
        help="Path to config file",
    )
    p.add_argument("--secret", "-s", help="Shared secret (default: RADIUS_CODEC_SECRET)")
    p.add_argument("--log-level", help="Override [logging] level")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub_check = sub.add_parser(
        "check-config", help="Validate configuration and report issues"
    )
    sub_check.set_defaults(func=cmd_check_config)

    sub_decode = sub.add_parser("decode", help="Decode a hex packet to JSON")
    sub_decode.add_argument("data", help="Packet bytes as hex ('-' reads stdin)")
    sub_decode.set_defaults(func=cmd_decode)

    sub_encode = sub.add_parser("encode", help="Encode a packet and print hex")
    sub_encode.add_argument("--code", type=int, required=True, help="Packet code")
    sub_encode.add_argument("--identifier", type=int, default=0)
    sub_encode.add_argument(
        "--authenticator", help="16-byte authenticator as hex (random if omitted)"
    )
    sub_encode.add_argument(
        "--attr",
        action="append",
        help="Attribute as NAME=VALUE; VALUE prefixed with 0x is hex (repeatable)",
    )
    sub_encode.set_defaults(func=cmd_encode)

    sub_auth = sub.add_parser(
        "authenticator", help="Print a random request authenticator"
    )
    sub_auth.set_defaults(func=cmd_authenticator)

    return p


class _Cmd(Protocol):
    def __call__(self, args: argparse.Namespace) -> int: ...


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    func = cast(_Cmd, getattr(args, "func"))
    try:
        return func(args)
    except RadiusCodecError as exc:
        logger.debug("Command failed", event="radius.cli.failed", error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
