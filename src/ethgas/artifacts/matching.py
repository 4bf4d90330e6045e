"""
Bytecode and calldata matching primitives.

Two different fingerprints are in play during a run:

* creation input is compared against compiled creation-bytecode templates
  with ``matches_template``;
* deployed runtime code is digested with ``fingerprint`` and used as the
  key of the CodeHashIndex.

The fingerprint is SHA-1 over the lowercase hex string. It only has to tell
compiled contracts apart, not resist tampering.
"""

import hashlib
import re
from functools import lru_cache
from typing import Optional


# Library link placeholders, as they appear in unlinked solc output:
#   __LibName_______________________________  (solc < 0.5)
#   __$<34 hex chars of keccak>$__             (solc >= 0.5)
# Both are 40 hex characters starting with "__".
LINK_PLACEHOLDER = re.compile(r'__.{38}')
# PUSH20 of the library's own address, filled in at deploy time
LIBRARY_ADDRESS_PLACEHOLDER = re.compile(r'73f{40}')

_WILDCARDS = re.compile(f'({LINK_PLACEHOLDER.pattern}|{LIBRARY_ADDRESS_PLACEHOLDER.pattern})')


def composite_key(contract_name: str, selector: str) -> str:
    """Key a method record by contract name and 4-byte selector (hex, no 0x)."""
    return f"{contract_name}_{selector}"


def strip_hex_prefix(value: str) -> str:
    value = (value or '').lower()
    return value[2:] if value.startswith('0x') else value


def fingerprint(code: str) -> str:
    """Digest of deployed code used to recognise a compiled contract on chain."""
    return hashlib.sha1(('0x' + strip_hex_prefix(code)).encode('ascii')).hexdigest()


def method_selector(calldata: str) -> Optional[str]:
    """The 4-byte selector as 8 lowercase hex chars, or None for short calldata."""
    data = strip_hex_prefix(calldata)
    if len(data) < 8:
        return None
    return data[:8]


def compute_method_composite_key(contract_name: Optional[str], calldata: str) -> Optional[str]:
    """Composite key for a call into ``contract_name`` with ``calldata``."""
    selector = method_selector(calldata)
    if contract_name is None or selector is None:
        return None
    return composite_key(contract_name, selector)


@lru_cache(maxsize=1024)
def template_pattern(template: str) -> re.Pattern:
    """
    Compile a creation-bytecode template into a prefix regex.

    Link placeholders become fixed-width wildcards; everything after the
    template (constructor arguments) is left unconstrained.
    """
    body = strip_hex_prefix(template)
    parts = []
    for i, piece in enumerate(_WILDCARDS.split(body)):
        if not piece:
            continue
        if i % 2:
            parts.append('.{%d}' % len(piece))
        else:
            parts.append(re.escape(piece))
    return re.compile(''.join(parts), re.DOTALL)


def matches_template(creation_input: str, template: str) -> bool:
    """True if ``creation_input`` starts with ``template`` modulo link placeholders."""
    return template_pattern(template or '0x').match(strip_hex_prefix(creation_input)) is not None
