"""
Link update module.

Repoints the custom kernel symlinks in the boot directory and mirrors
the selected images onto the EFI System Partition.
"""

import os
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .config import BootPaths
from .detector import (
    CUSTOM_INITRD_LINK,
    CUSTOM_KERNEL_LINK,
    initrd_image_name,
    kernel_image_name,
)
from .errors import LinkUpdateError

EFI_KERNEL_NAME = "vmlinuz-custom.efi"
EFI_INITRD_NAME = "initrd.img-custom"

_TMP_SUFFIX = ".tmp"


class ActionKind(Enum):
    """Kind of filesystem action."""
    SYMLINK = "symlink"
    COPY = "copy"


@dataclass
class LinkAction:
    """
    One filesystem step of applying a selection.

    Attributes:
        kind: SYMLINK creates destination pointing at source (a name relative
            to the link's directory); COPY copies the file source resolves to
        source: Link target or file to copy
        destination: Path of the link or copy
    """
    kind: ActionKind
    source: str
    destination: str

    def describe(self) -> str:
        """Return a shell-like description of the action."""
        if self.kind == ActionKind.SYMLINK:
            return f"ln -sf {self.source} {self.destination}"
        return f"cp {self.source} {self.destination}"


def check_root() -> bool:
    """
    Check if the current process runs as root.

    Returns:
        bool: True if running with root privileges, False otherwise
    """
    try:
        return os.geteuid() == 0
    except AttributeError:
        # os.geteuid() not available on Windows
        return False


def plan_selection(paths: BootPaths, version: str) -> List[LinkAction]:
    """
    Generate the actions that make version the custom kernel.

    The initrd link is repointed before the kernel link, since the kernel
    link is what identifies the current selection.

    Args:
        paths: Boot and EFI directories
        version: Kernel version to select

    Returns:
        List[LinkAction]: Actions in execution order

    Raises:
        LinkUpdateError: If the kernel image or initrd for version is missing
    """
    missing = [
        name
        for name in (kernel_image_name(version), initrd_image_name(version))
        if not os.path.exists(os.path.join(paths.boot_path, name))
    ]
    if missing:
        raise LinkUpdateError(
            f"Cannot select kernel {version}: missing "
            + ", ".join(f"'{os.path.join(paths.boot_path, n)}'" for n in missing),
            hint="Make sure the kernel package and its initrd are fully installed.",
        )

    initrd_link = os.path.join(paths.boot_path, CUSTOM_INITRD_LINK)
    kernel_link = os.path.join(paths.boot_path, CUSTOM_KERNEL_LINK)

    return [
        LinkAction(ActionKind.SYMLINK, initrd_image_name(version), initrd_link),
        LinkAction(ActionKind.SYMLINK, kernel_image_name(version), kernel_link),
        LinkAction(ActionKind.COPY, initrd_link, os.path.join(paths.efi_path, EFI_INITRD_NAME)),
        LinkAction(ActionKind.COPY, kernel_link, os.path.join(paths.efi_path, EFI_KERNEL_NAME)),
    ]


def _discard(tmp_path: str) -> None:
    try:
        if os.path.lexists(tmp_path):
            os.remove(tmp_path)
    except OSError:
        pass  # the original failure is the one reported


def _replace_symlink(target: str, link_path: str) -> None:
    tmp_path = link_path + _TMP_SUFFIX
    if os.path.lexists(tmp_path):
        os.remove(tmp_path)
    try:
        os.symlink(target, tmp_path)
        os.replace(tmp_path, link_path)
    except OSError:
        _discard(tmp_path)
        raise


def _replace_file(source: str, destination: str) -> None:
    # FAT has no ownership or permission bits, so only contents are copied
    tmp_path = destination + _TMP_SUFFIX
    try:
        shutil.copyfile(source, tmp_path)
        os.replace(tmp_path, destination)
    except OSError:
        _discard(tmp_path)
        raise


def execute_action(action: LinkAction) -> None:
    """
    Perform a single action.

    Raises:
        LinkUpdateError: If the underlying filesystem operation fails
    """
    try:
        if action.kind == ActionKind.SYMLINK:
            _replace_symlink(action.source, action.destination)
        else:
            _replace_file(action.source, action.destination)
    except OSError as e:
        raise LinkUpdateError(
            f"Failed to {action.describe()}: {e.strerror or e}",
            step=action.describe(),
            hint="Earlier steps were not rolled back. Fix the problem and run the command again.",
        )


def apply_selection(
    paths: BootPaths,
    version: str,
    dry_run: bool = False,
    progress: Optional[Callable[[LinkAction], None]] = None,
) -> List[LinkAction]:
    """
    Point the custom links at version and copy the images to the ESP.

    Steps run in order and stop at the first failure; completed steps are
    not rolled back.

    Args:
        paths: Boot and EFI directories
        version: Kernel version to select
        dry_run: If True, only plan the actions
        progress: Called with each action before it is performed

    Returns:
        List[LinkAction]: The actions performed (or planned, in dry-run mode)

    Raises:
        LinkUpdateError: If an image is missing or a step fails
    """
    actions = plan_selection(paths, version)

    for action in actions:
        if progress is not None:
            progress(action)
        if not dry_run:
            execute_action(action)

    return actions
