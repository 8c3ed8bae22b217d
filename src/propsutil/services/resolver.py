"""Value resolution: pick one raw string per field.

Precedence, first match wins:
    1. ``env_var`` set and present in the environment snapshot
       (an empty value still counts as present)
    2. ``key`` present in the mapping
    3. ``default`` declared
    4. absent
"""

import os
from typing import Mapping, Optional

from ..interfaces import FieldDescriptor, Resolution, ResolutionSource


def snapshot_environment() -> dict[str, str]:
    """Copy ``os.environ`` so one bind call sees a fixed environment."""
    return dict(os.environ)


def resolve(
    descriptor: FieldDescriptor,
    mapping: Mapping[str, str],
    environ: Optional[Mapping[str, str]] = None,
) -> Resolution:
    """Resolve the raw string for ``descriptor``.

    Args:
        descriptor: Field to resolve.
        mapping: Parsed properties.
        environ: Environment snapshot. ``None`` skips the environment step.

    Returns:
        A present ``Resolution`` tagged with its source, or
        ``Resolution.absent()``.
    """
    if environ is not None and descriptor.env_var is not None:
        value = environ.get(descriptor.env_var)
        if value is not None:
            return Resolution(value, ResolutionSource.ENVIRONMENT)

    if descriptor.key in mapping:
        return Resolution(mapping[descriptor.key], ResolutionSource.MAPPING)

    if descriptor.default is not None:
        return Resolution(descriptor.default, ResolutionSource.DEFAULT)

    return Resolution.absent()
