"""
Configuration module.

Reads the boot and EFI directories from the configuration file and
bootstraps that file from the output of 'kernelstub --print-config'.
"""

import configparser
import os
import re
import subprocess
from dataclasses import dataclass
from typing import Dict, List

from .errors import ConfigError

CONFIG_FOLDER_PATH = "/etc/custom-kernel"
CONFIG_PATH = os.path.join(CONFIG_FOLDER_PATH, "config.ini")

_SECTION = "custom-kernel"
_INIT_HINT = "Run 'custom-kernel --init-config' to initialize the configuration file."

KERNELSTUB_COMMAND = ["kernelstub", "--print-config"]

# Fields read from 'kernelstub --print-config', e.g. "    ESP Path:.........../boot/efi"
KERNELSTUB_FIELDS = ("Kernel Image Path", "ESP Path", "Root FS UUID")
_KERNELSTUB_LINE = re.compile(r'^\s*(?P<label>[^:]+?):\.*(?P<value>.*?)\s*$')


@dataclass(frozen=True)
class BootPaths:
    """
    Directories the custom kernel is managed in.

    Attributes:
        boot_path: Directory with kernel images, initrds and the custom links
        efi_path: Folder on the EFI System Partition the boot manager loads from
    """
    boot_path: str
    efi_path: str


@dataclass(frozen=True)
class BootConfig:
    """
    Values reported by kernelstub.

    Attributes:
        kernel_image_path: Path of the default kernel image (e.g. '/boot/vmlinuz')
        esp_path: Mount point of the EFI System Partition
        root_fs_uuid: UUID of the root filesystem
    """
    kernel_image_path: str
    esp_path: str
    root_fs_uuid: str

    @property
    def boot_path(self) -> str:
        """Directory holding the kernel images."""
        return os.path.dirname(self.kernel_image_path)


def _parse_config_text(text: str) -> Dict[str, str]:
    parser = configparser.ConfigParser(
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        interpolation=None,
    )
    try:
        parser.read_string(f"[{_SECTION}]\n{text}")
    except configparser.Error as e:
        raise ConfigError(f"Malformed configuration file: {e}", hint=_INIT_HINT)

    values = {}
    for key, value in parser.items(_SECTION):
        values[key.upper()] = value.strip().strip("\"'")
    return values


def read_config(config_path: str = CONFIG_PATH) -> BootPaths:
    """
    Read and validate the configuration file.

    Args:
        config_path: Path of the configuration file

    Returns:
        BootPaths: Validated boot and EFI directories

    Raises:
        ConfigError: If the file is missing or a path is unset or not a directory
    """
    config_folder = os.path.dirname(config_path)

    if not os.path.isdir(config_folder):
        raise ConfigError(f"Config folder not found at '{config_folder}'.", hint=_INIT_HINT)
    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found at '{config_path}'.", hint=_INIT_HINT)

    try:
        with open(config_path, encoding="utf-8") as f:
            values = _parse_config_text(f.read())
    except OSError as e:
        raise ConfigError(
            f"Cannot read config file '{config_path}': {e.strerror or e}",
            hint="Check the file permissions, or run 'custom-kernel --init-config' to recreate it.",
        )

    boot_path = values.get("BOOT_PATH", "")
    if not boot_path:
        raise ConfigError(
            "BOOT_PATH is not set.",
            hint=f"{_INIT_HINT} This sets BOOT_PATH in '{config_path}'.",
        )
    if not os.path.isdir(boot_path):
        raise ConfigError(
            f"The specified BOOT_PATH '{boot_path}' does not exist on the filesystem.",
            hint="Make sure the output of 'kernelstub --print-config' has the correct Kernel Image Path.",
        )

    efi_path = values.get("EFI_PATH", "")
    if not efi_path:
        raise ConfigError(
            "EFI_PATH is not set.",
            hint=f"{_INIT_HINT} This sets EFI_PATH in '{config_path}'.",
        )
    if not os.path.isdir(efi_path):
        raise ConfigError(
            f"The specified EFI_PATH '{efi_path}' does not exist on the filesystem.",
            hint="Make sure the output of 'kernelstub --print-config' has the correct "
                 "ESP Path and Root FS UUID.",
        )

    return BootPaths(boot_path=boot_path, efi_path=efi_path)


def parse_kernelstub_output(output: str) -> BootConfig:
    """
    Extract the boot configuration from 'kernelstub --print-config' output.

    Args:
        output: Combined stdout and stderr of kernelstub

    Returns:
        BootConfig: Parsed values

    Raises:
        ConfigError: If a required field is missing or empty
    """
    found = {}
    for line in output.splitlines():
        match = _KERNELSTUB_LINE.match(line)
        if match and match.group("label") in KERNELSTUB_FIELDS:
            found.setdefault(match.group("label"), match.group("value"))

    for field in KERNELSTUB_FIELDS:
        if not found.get(field):
            raise ConfigError(
                f"'{field}' not found in the output of 'kernelstub --print-config'.",
                hint="Make sure kernelstub is configured correctly for this system.",
            )

    kernel_image_path = found["Kernel Image Path"]
    if not os.path.dirname(kernel_image_path):
        raise ConfigError(
            f"Kernel Image Path '{kernel_image_path}' has no directory component."
        )

    return BootConfig(
        kernel_image_path=kernel_image_path,
        esp_path=found["ESP Path"],
        root_fs_uuid=found["Root FS UUID"],
    )


def fetch_boot_config() -> BootConfig:
    """
    Query kernelstub for the boot configuration.

    Raises:
        ConfigError: If kernelstub cannot be run or its output is incomplete
    """
    try:
        result = subprocess.run(
            KERNELSTUB_COMMAND,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        raise ConfigError(
            "kernelstub was not found.",
            hint="This tool requires a system managed by kernelstub (e.g. Pop!_OS).",
        )
    return parse_kernelstub_output(result.stdout or "")


def find_efi_path(esp_path: str, root_fs_uuid: str) -> str:
    """
    Locate the operating system's folder on the EFI System Partition.

    Searches '<esp_path>/EFI' for the first directory (in sorted walk order)
    whose name contains the root filesystem UUID.

    Raises:
        ConfigError: If no such directory exists
    """
    efi_root = os.path.join(esp_path, "EFI")

    for dirpath, dirnames, _ in os.walk(efi_root):
        dirnames.sort()
        for name in dirnames:
            if root_fs_uuid in name:
                return os.path.join(dirpath, name)

    raise ConfigError(
        f"EFI folder for Root FS UUID '{root_fs_uuid}' not found under '{efi_root}'.",
        hint="Make sure the output of 'kernelstub --print-config' has the correct "
             "ESP Path and Root FS UUID.",
    )


def render_config(boot_path: str, efi_path: str) -> str:
    """Render the configuration file content."""
    return (
        "### Configuration settings for custom kernel management\n"
        "\n"
        "# BOOT_PATH: Specifies the directory where kernel images (vmlinuz) and "
        "initial RAM disks (initrd.img) are located.\n"
        f"BOOT_PATH={boot_path}\n"
        "\n"
        "# EFI_PATH: Specifies the full path to the EFI folder on the EFI System "
        "Partition for the local operating system.\n"
        f"EFI_PATH={efi_path}\n"
    )


def write_config(content: str, config_path: str = CONFIG_PATH, dry_run: bool = False) -> List[str]:
    """
    Write the configuration file, creating its folder if needed.

    Args:
        content: File content
        config_path: Destination path
        dry_run: If True, only report what would be done

    Returns:
        List[str]: Descriptions of the actions taken (or planned)

    Raises:
        ConfigError: If the folder or file cannot be written
    """
    actions = []
    config_folder = os.path.dirname(config_path)

    if not os.path.isdir(config_folder):
        actions.append(f"mkdir -p {config_folder}")
    actions.append(f"write {config_path}")

    if dry_run:
        return actions

    try:
        os.makedirs(config_folder, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ConfigError(f"Cannot write config file '{config_path}': {e.strerror or e}")

    return actions

