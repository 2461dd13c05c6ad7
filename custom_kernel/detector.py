"""
Kernel detection module.

Discovers the kernel images installed in the boot directory and the
kernel currently selected through the custom symlinks.
"""

import os
from typing import Optional, Set

from .errors import InventoryError, SelectionError

KERNEL_PREFIX = "vmlinuz-"
INITRD_PREFIX = "initrd.img-"

CUSTOM_KERNEL_LINK = "vmlinuz.custom"
CUSTOM_INITRD_LINK = "initrd.img.custom"


def kernel_image_name(version: str) -> str:
    """Return the kernel image file name for a version."""
    return f"{KERNEL_PREFIX}{version}"


def initrd_image_name(version: str) -> str:
    """Return the initrd image file name for a version."""
    return f"{INITRD_PREFIX}{version}"


def get_available_kernels(boot_path: str) -> Set[str]:
    """
    Get the versions of all kernel images in the boot directory.

    Every non-directory entry named 'vmlinuz-<version>' contributes
    '<version>'. The custom symlinks ('vmlinuz.custom') and the distribution
    links ('vmlinuz', 'vmlinuz.old') do not match the prefix.

    Args:
        boot_path: Directory holding kernel images

    Returns:
        Set[str]: Installed kernel versions (empty if none)

    Raises:
        InventoryError: If the boot directory cannot be read
    """
    try:
        entries = list(os.scandir(boot_path))
    except OSError as e:
        raise InventoryError(
            f"Cannot read boot directory '{boot_path}': {e.strerror or e}",
            hint="Check that BOOT_PATH in the configuration points to a readable directory.",
        )

    kernels = set()
    for entry in entries:
        if not entry.name.startswith(KERNEL_PREFIX):
            continue
        version = entry.name[len(KERNEL_PREFIX):]
        if not version:
            continue
        try:
            if entry.is_dir():
                continue
        except OSError:
            continue
        kernels.add(version)

    return kernels


def get_current_custom_kernel(boot_path: str) -> Optional[str]:
    """
    Detect the kernel version the custom symlink points to.

    Args:
        boot_path: Directory holding the 'vmlinuz.custom' symlink

    Returns:
        Optional[str]: Selected version, or None when no custom kernel is set

    Raises:
        SelectionError: If 'vmlinuz.custom' exists but is not a symlink to a
            'vmlinuz-<version>' file
    """
    link_path = os.path.join(boot_path, CUSTOM_KERNEL_LINK)

    if not os.path.islink(link_path):
        if os.path.lexists(link_path):
            raise SelectionError(
                f"'{link_path}' exists but is not a symbolic link.",
                hint="Move it out of the way and run 'custom-kernel' to select a kernel.",
            )
        return None

    target = os.readlink(link_path)
    name = os.path.basename(target)

    if not name.startswith(KERNEL_PREFIX) or len(name) == len(KERNEL_PREFIX):
        raise SelectionError(
            f"'{link_path}' points to '{target}', which is not a "
            f"'{KERNEL_PREFIX}<version>' kernel image.",
            hint="Run 'custom-kernel' to select a kernel again.",
        )

    return name[len(KERNEL_PREFIX):]
