"""Installed package discovery for autodef."""

from packages.installed import (
    DESCRIPTOR_FILENAME,
    PackageDescriptor,
    PackageInfo,
    load_descriptor,
    package_directories,
)

__all__ = [
    "DESCRIPTOR_FILENAME",
    "PackageDescriptor",
    "PackageInfo",
    "load_descriptor",
    "package_directories",
]
