"""
Kernel module path matcher.

Recognizes module files installed below /lib/modules/<kernelVersion>/ and
turns them into the (kernelVersion, moduleName) pair used for conflict
detection.
"""

import re

# /lib/modules/<ver>/<subdirs>/<name>.ko[.gz|.xz|.zst] or <name>.zst
_MODULE_PATH = re.compile(
    r"^(?:/usr)?/lib/modules/([^/]+)/(?:[^/]+/)*([^/]+?)(?:\.ko(?:\.gz|\.xz|\.zst)?|\.zst)$"
)


def normalize_module_name(name: str) -> str:
    """modprobe treats '-' and '_' alike; compare on the underscore form."""
    return name.replace("-", "_")


def match_module(path: str) -> tuple[str, str] | None:
    """
    Match a file path against the kernel module layout.

    Args:
        path: Absolute file path, e.g. from an rpm file list.

    Returns:
        (kernel_version, normalized_module_name), or None if the path is not
        a kernel module.
    """
    match = _MODULE_PATH.match(path)
    if not match:
        return None
    kernel_version, name = match.groups()
    return kernel_version, normalize_module_name(name)


def module_id(path: str) -> str | None:
    """Return the "<kernelVersion>/<name>" identifier for a module path."""
    matched = match_module(path)
    if matched is None:
        return None
    return "/".join(matched)
