"""
Command-line interface for custom-kernel.

Provides argument parsing and orchestrates selecting a custom kernel,
advancing it to the next installed version and initializing the
configuration.
"""

import sys
import argparse
from typing import Optional, Set

from . import __version__
from .config import (
    CONFIG_PATH,
    BootPaths,
    fetch_boot_config,
    find_efi_path,
    read_config,
    render_config,
    write_config,
)
from .detector import get_available_kernels, get_current_custom_kernel
from .errors import (
    CustomKernelError,
    InventoryError,
    PrivilegeError,
    SelectionAborted,
    SelectionError,
)
from .linker import apply_selection, check_root
from .prompt import confirm_retry, prompt_for_kernel_selection
from .reporter import Reporter, OutputLevel
from .versions import (
    filter_family,
    find_next_version,
    sort_kernel_versions,
    version_family_pattern,
)


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.
    
    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="custom-kernel",
        description="Manage custom kernels on systems that use kernelstub.",
        epilog=(
            "Default behavior (no option provided or with --dry-run only):\n"
            "  Starts an interactive command line dialog to select and set a custom kernel."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    
    parser.add_argument(
        "-d", "--dry-run",
        action="store_true",
        help="Print actions without executing them",
    )
    
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-u", "--update",
        action="store_true",
        help="Update to the next available custom kernel",
    )
    mode.add_argument(
        "-i", "--init-config",
        action="store_true",
        help="Initialize the configuration file. Uses the values from kernelstub",
    )
    
    parser.add_argument(
        "--config",
        default=CONFIG_PATH,
        metavar="PATH",
        help=f"Configuration file (default: {CONFIG_PATH})",
    )
    
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    
    return parser


def _setup_reporter(args) -> Reporter:
    """
    Set up reporter based on command-line arguments.
    
    Args:
        args: Parsed command-line arguments
        
    Returns:
        Reporter: Configured reporter instance
    """
    if args.quiet:
        output_level = OutputLevel.QUIET
    elif args.verbose:
        output_level = OutputLevel.VERBOSE
    else:
        output_level = OutputLevel.NORMAL
    
    return Reporter(output_level)


def _scan_kernels(paths: BootPaths, reporter: Reporter) -> Set[str]:
    reporter.detail(f"Scanning {paths.boot_path} for kernel images...")
    available = get_available_kernels(paths.boot_path)
    reporter.detail(f"Found {len(available)} kernel image(s)")
    return available


def _apply(paths: BootPaths, version: str, reporter: Reporter, dry_run: bool) -> None:
    apply_selection(
        paths,
        version,
        dry_run=dry_run,
        progress=lambda action: reporter.print_action(action, dry_run=dry_run),
    )


def set_custom_kernel(paths: BootPaths, reporter: Reporter, dry_run: bool = False) -> str:
    """
    Let the operator choose a kernel and make it the custom kernel.
    
    An empty or invalid choice offers another attempt; declining ends
    the operation.
    
    Args:
        paths: Boot and EFI directories
        reporter: Reporter instance for output
        dry_run: If True, only report the actions
        
    Returns:
        str: The selected kernel version
        
    Raises:
        InventoryError: If no kernels are installed
        SelectionAborted: If the operator declines to choose again
    """
    available = _scan_kernels(paths, reporter)
    if not available:
        raise InventoryError(
            f"No kernel images (vmlinuz-*) found in '{paths.boot_path}'.",
            hint="Make sure BOOT_PATH in the configuration is the directory holding your kernels.",
        )
    
    current = get_current_custom_kernel(paths.boot_path)
    sorted_kernels = sort_kernel_versions(available)
    
    while True:
        selected = prompt_for_kernel_selection(sorted_kernels, current)
        if selected:
            break
        reporter.info("\nNo kernel selected.")
        if not confirm_retry():
            raise SelectionAborted("Exiting without selecting a kernel.")
    
    reporter.print_new_kernel(selected)
    _apply(paths, selected, reporter, dry_run)
    return selected


def update_to_next_kernel(paths: BootPaths, reporter: Reporter, dry_run: bool = False) -> Optional[str]:
    """
    Advance the custom kernel to the next version in its family.
    
    Args:
        paths: Boot and EFI directories
        reporter: Reporter instance for output
        dry_run: If True, only report the actions
        
    Returns:
        Optional[str]: The new custom kernel, or None if it is already the
            newest of its family
        
    Raises:
        SelectionError: If no custom kernel is set
    """
    current = get_current_custom_kernel(paths.boot_path)
    if current is None:
        raise SelectionError(
            "No custom kernel set.",
            hint="Run 'custom-kernel' without options to set a custom kernel first.",
        )
    
    reporter.print_current_kernel(current)
    
    available = _scan_kernels(paths, reporter)
    reporter.print_family(
        version_family_pattern(current).pattern,
        filter_family(available, current),
    )
    
    next_kernel = find_next_version(available, current)
    if next_kernel is None:
        reporter.print_no_next_kernel(current)
        return None
    
    reporter.print_new_kernel(next_kernel)
    _apply(paths, next_kernel, reporter, dry_run)
    return next_kernel


def run_init_config(config_path: str, reporter: Reporter, dry_run: bool = False) -> BootPaths:
    """
    Write the configuration file from the values reported by kernelstub.
    
    Args:
        config_path: Configuration file to write
        reporter: Reporter instance for output
        dry_run: If True, only report the actions
        
    Returns:
        BootPaths: The discovered boot and EFI directories
    """
    reporter.detail("Reading boot configuration from kernelstub...")
    boot_config = fetch_boot_config()
    
    reporter.info(f"\nBoot Path: {boot_config.boot_path}")
    reporter.info(f"ESP Path: {boot_config.esp_path}")
    reporter.info(f"Root FS UUID: {boot_config.root_fs_uuid}")
    
    efi_path = find_efi_path(boot_config.esp_path, boot_config.root_fs_uuid)
    reporter.info(f"EFI folder path found: {efi_path}")
    
    paths = BootPaths(boot_path=boot_config.boot_path, efi_path=efi_path)
    
    reporter.info(f"\nInitializing {config_path} with newest values from kernelstub...")
    actions = write_config(render_config(paths.boot_path, paths.efi_path), config_path, dry_run)
    for action in actions:
        reporter.print_command(action, dry_run=dry_run)
    
    if not dry_run:
        reporter.info("\nConfiguration file updated successfully.")
    
    return paths


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.
    
    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        
    Returns:
        int: Exit code:
            0 = success (including no newer kernel to update to)
            1 = configuration, inventory or selection error, or aborted
            -1 = insufficient privileges (not root)
            -2 = updating the links or EFI copies failed
    """
    parser = create_parser()
    
    if argv is None:
        argv = sys.argv[1:]
    
    if argv[:1] == ["help"]:
        parser.print_help()
        return 0
    
    args = parser.parse_args(argv)
    
    if args.quiet and args.verbose:
        parser.error("--quiet and --verbose cannot be used together")
        return 1
    
    reporter = _setup_reporter(args)
    
    try:
        # Mutating commands need root; dry runs only read
        if not args.dry_run and not check_root():
            raise PrivilegeError(
                "This command must be run as root.",
                hint="Run it with sudo, or add --dry-run to preview the changes.",
            )
        
        if args.init_config:
            run_init_config(args.config, reporter, dry_run=args.dry_run)
        else:
            paths = read_config(args.config)
            reporter.detail(f"Boot path: {paths.boot_path}")
            reporter.detail(f"EFI path: {paths.efi_path}")
            
            if args.update:
                if update_to_next_kernel(paths, reporter, dry_run=args.dry_run) is None:
                    return 0  # Nothing to do
            else:
                set_custom_kernel(paths, reporter, dry_run=args.dry_run)
        
        reporter.print_completion(args.dry_run)
        return 0
    
    except CustomKernelError as e:
        reporter.print_error(e)
        return e.exit_code
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
