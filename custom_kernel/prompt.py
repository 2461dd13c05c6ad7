"""
Interactive kernel selection.

Renders the numbered list of installed kernels and reads the operator's
choice from standard input.
"""

from typing import List, Optional


def _read(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def calculate_formatting_length(sorted_kernels: List[str]) -> int:
    """
    Width of the separator lines framing the kernel list.

    Covers the longest version plus the 'N: ' numbering prefix.
    """
    if not sorted_kernels:
        return 0
    longest = max(len(kernel) for kernel in sorted_kernels)
    return longest + (3 if len(sorted_kernels) < 10 else 4)


def render_kernel_menu(sorted_kernels: List[str], current: Optional[str]) -> str:
    """
    Render the selection menu.

    Args:
        sorted_kernels: Installed kernels in version order
        current: Currently selected custom kernel, or None

    Returns:
        str: Menu text, without the input prompt
    """
    separator = "-" * calculate_formatting_length(sorted_kernels)

    lines = [""]
    if current:
        lines.append(f"Your current custom kernel is: {current}")
    else:
        lines.append("No custom kernel set.")
    lines.append("")
    lines.append("Choose kernel:")
    lines.append(separator)
    for number, kernel in enumerate(sorted_kernels, start=1):
        lines.append(f"{number}: {kernel}")
    lines.append(separator)

    return "\n".join(lines)


def parse_selection(response: str, sorted_kernels: List[str]) -> Optional[str]:
    """
    Map the operator's response to a kernel.

    Returns:
        Optional[str]: The chosen kernel, or None for an empty, non-numeric
            or out-of-range response
    """
    response = response.strip()
    # isdigit() also accepts superscripts, which int() rejects
    if not response.isdecimal():
        return None

    number = int(response)
    if 1 <= number <= len(sorted_kernels):
        return sorted_kernels[number - 1]
    return None


def prompt_for_kernel_selection(sorted_kernels: List[str], current: Optional[str]) -> Optional[str]:
    """
    Show the menu and read one choice.

    Args:
        sorted_kernels: Installed kernels in version order
        current: Currently selected custom kernel, or None

    Returns:
        Optional[str]: The chosen kernel, or None if nothing valid was chosen
    """
    print(render_kernel_menu(sorted_kernels, current))
    response = _read(f"Enter [1-{len(sorted_kernels)}]: ")
    return parse_selection(response, sorted_kernels)


def confirm_retry() -> bool:
    """Ask whether to choose again after an empty selection."""
    response = _read("Do you want to try again? [y|N]: ").lower()
    return response in ("y", "yes")
