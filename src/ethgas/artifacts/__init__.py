"""
Artifact mapping for ethgas.

Turns compiled contract artifacts into the method and deployment records a
gas run starts from, and provides the bytecode/calldata matching primitives
the attribution core relies on.
"""

from .matching import (
    composite_key,
    compute_method_composite_key,
    fingerprint,
    matches_template,
    method_selector,
)

__all__ = [
    'build_records',
    'composite_key',
    'compute_method_composite_key',
    'fingerprint',
    'matches_template',
    'method_selector',
]


# Lazy import: the mapper depends on ethgas.core, which depends on .matching
def build_records(artifacts_dir, src_path=None, client=None):
    """Build the records for a gas run. See ``ethgas.artifacts.mapper.build_records``."""
    from .mapper import build_records as _build_records
    return _build_records(artifacts_dir, src_path=src_path, client=client)
