"""
RPM Query Output Parser.

Parses the line formats produced by the rpm queries kmp-install issues.
"""

from kmp_install.models.package import Package
from kmp_install.parsers.modules import module_id

# One line per owned file: "NAME VERSION RELEASE ARCH FILENAME"
INSTALLED_QUERY_FORMAT = "[%{NAME} %{VERSION} %{RELEASE} %{ARCH} %{FILENAMES}\\n]"
IDENTITY_QUERY_FORMAT = "%{NAME}-%{VERSION}-%{RELEASE}.%{ARCH}\\n"


def parse_installed(lines) -> list[Package]:
    """
    Group per-file rpm query lines into one Package per installed instance.

    Lines are keyed on "name-version-release.arch"; the first line of a key
    creates the Package, and every line whose file is a kernel module adds
    that module to it.

    Args:
        lines: Output lines of the installed-KMP query.

    Returns:
        Installed KMPs in the order rpm reported them.
    """
    packages: dict[str, Package] = {}
    for line in lines:
        fields = line.split(maxsplit=4)
        if len(fields) < 4:
            continue
        name, version, release, arch = fields[:4]
        key = f"{name}-{version}-{release}.{arch}"

        package = packages.get(key)
        if package is None:
            package = Package.create(name, f"{version}-{release}", arch)
            if package is None:
                continue
            packages[key] = package

        if len(fields) == 5:
            module = module_id(fields[4].strip())
            if module is not None:
                package.modules.add(module)

    return list(packages.values())


def parse_manifest(lines) -> set[str]:
    """Return the module identifiers found in an archive's file list."""
    modules = set()
    for line in lines:
        module = module_id(line.strip())
        if module is not None:
            modules.add(module)
    return modules
