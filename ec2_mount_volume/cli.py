"""
ec2-mount-volume - mount EBS volumes, exposed as NVMe block devices, at the
location named in a resource tag.

An instance with a root volume and one data volume may see "/dev/nvme0n1" and
"/dev/nvme1n1" after one boot and the reverse after the next. The volume tag
gives each volume a stable mount point.

Display the mount plan for 2 expected EBS volumes (dry run):

    ec2-mount-volume --device-num 2

Mount 2 expected EBS volumes:

    ec2-mount-volume --device-num 2 --force

Read mount points from tags named "mount-point" and wait 30 seconds:

    ec2-mount-volume --device-num 2 --force --tag mount-point --timeout 30

Every flag can also be set through an EC2_MOUNT_VOLUME_* environment variable,
e.g. EC2_MOUNT_VOLUME_DEVICE_NUM=2.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, TextIO

from .config import ENV_PREFIX, Settings
from .core.exceptions import (
    ConfigurationError,
    DeviceCountMismatchError,
    MountVolumeError,
)
from .dependencies import get_mount_volume_service, load_settings
from .logging_config import setup_logging

EXIT_OK = 0
EXIT_DEVICE_COUNT_MISMATCH = 1
EXIT_FATAL = 2


def _field_help(name: str) -> str:
    field = Settings.model_fields[name]
    env_var = ENV_PREFIX + name.upper()
    if field.default is None:
        return f"{field.description} (env: {env_var})"
    return f"{field.description} (default: {field.default}, env: {env_var})"


def build_parser() -> argparse.ArgumentParser:
    # Defaults are suppressed so only explicit flags override the environment
    parser = argparse.ArgumentParser(
        prog="ec2-mount-volume",
        description="Mount /dev/disk/by-id/* volumes mapped by their tags",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        argument_default=argparse.SUPPRESS,
    )
    parser.add_argument("--device-num", dest="device_num", type=int, help=_field_help("device_num"))
    parser.add_argument("--force", action="store_true", help=_field_help("force"))
    parser.add_argument("--fs-type", dest="fs_type", help=_field_help("fs_type"))
    parser.add_argument("--mount-opt", dest="mount_opt", help=_field_help("mount_opt"))
    parser.add_argument("--part-suffix", dest="part_suffix", help=_field_help("part_suffix"))
    parser.add_argument("--tag", help=_field_help("tag"))
    parser.add_argument("--timeout", type=int, help=_field_help("timeout"))
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Diagnostic log level (default: WARNING)",
    )
    return parser


def parse_settings(
    argv: Optional[List[str]] = None, parser: Optional[argparse.ArgumentParser] = None
) -> Settings:
    """Merge explicit flags over environment settings. Exits 2 on bad input."""
    parser = parser or build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(**vars(args))
    except ConfigurationError as e:
        parser.error(str(e))

    if settings.device_num is None:
        parser.error("the following arguments are required: --device-num")

    return settings


def main(
    argv: Optional[List[str]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    err = err or sys.stderr
    settings = parse_settings(argv)
    setup_logging(settings)

    logging.info(
        f"Starting ec2-mount-volume: device_num={settings.device_num}, "
        f"tag={settings.tag}, dry_run={settings.dry_run}, timeout={settings.timeout}s"
    )

    try:
        service = get_mount_volume_service(settings, out=out, err=err)
        asyncio.run(service.run())
    except DeviceCountMismatchError as e:
        err.write(f"{e}\n")
        return EXIT_DEVICE_COUNT_MISMATCH
    except MountVolumeError as e:
        logging.debug("Run aborted", exc_info=True)
        err.write(f"Error: {e}\n")
        return EXIT_FATAL

    return EXIT_OK
