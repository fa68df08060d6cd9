"""Preview link construction and resolution

A preview link carries the destination URL inside itself, so resolving it
needs no lookup table. Links have been issued in four shapes over time:

    <origin>/d/<token>      compressed token in the path (current)
    <origin>/v?c=<token>    compressed token in the query
    <origin>/v?d=<token>    base64 (legacy)
    <origin>/v?url=<token>  percent-encoded (oldest)

When a request carries several of them, the newest format wins; older
carriers are ignored rather than rejected.

Functions:
    build_preview_link(original: str, origin: str) -> str
        Encode a validated URL into a preview link.
    select_carrier(carriers: TokenCarriers) -> tuple[CarrierFormat, str] | None
        Pick the carrier to decode according to CARRIER_PRECEDENCE.
    resolve(carriers: TokenCarriers) -> ValidationResult
        Decode and validate the token of a preview request.

Example:
    >>> link = build_preview_link('https://example.com', 'https://q.rs')
    >>> token = link.removeprefix('https://q.rs/d/')
    >>> resolve(TokenCarriers(path=token)).url
    'https://example.com'
"""

import logging
from collections.abc import Callable

from beartype import beartype

from permaqr.constants import ErrorReason
from permaqr.encoding import encode, decode, decode_base64, decode_percent
from permaqr.exceptions import DecodeError
from permaqr.models import CarrierFormat, TokenCarriers, ValidationResult
from permaqr.validation import validate_preview


logger = logging.getLogger(__name__)

PREVIEW_PATH = '/d/'

# Newest format first
CARRIER_PRECEDENCE: tuple[CarrierFormat, ...] = (
    CarrierFormat.PATH_COMPRESSED,
    CarrierFormat.QUERY_COMPRESSED,
    CarrierFormat.QUERY_BASE64,
    CarrierFormat.QUERY_PERCENT_ENCODED,
)

DECODERS: dict[CarrierFormat, Callable[[str], str]] = {
    CarrierFormat.PATH_COMPRESSED: decode,
    CarrierFormat.QUERY_COMPRESSED: decode,
    CarrierFormat.QUERY_BASE64: decode_base64,
    CarrierFormat.QUERY_PERCENT_ENCODED: decode_percent,
}


@beartype
def build_preview_link(original: str, origin: str) -> str:
    """Build the link a QR code points to.

    The token travels in the path rather than in a `?c=` query parameter,
    which saves characters and keeps the QR code less dense. `original` must
    already have passed `validate_input()`; it is not checked again here.

    Args:
        original (str):
            Validated destination URL.
        origin (str):
            Public origin of the preview endpoint, e.g. 'https://q.rs'.

    Returns:
        str: '<origin>/d/<token>'

    Raises:
        GenerationError: if the URL cannot be encoded.
    """
    token = encode(original)
    return f'{origin.rstrip("/")}{PREVIEW_PATH}{token}'


def select_carrier(carriers: TokenCarriers) -> tuple[CarrierFormat, str] | None:
    """Return the highest-precedence carrier present and its raw token, or None."""
    for carrier in CARRIER_PRECEDENCE:
        token = carriers.get(carrier)
        if token:
            return carrier, token
    return None


def resolve(carriers: TokenCarriers) -> ValidationResult:
    """Decode and validate the token of a preview request.

    Single pass, every failure is terminal:
    - Step 1: No carrier present -> `no token`, nothing is decoded
    - Step 2: Select the carrier by precedence
    - Step 3: Decode it; failure -> `malformed token`
    - Step 4: Validate the decoded URL with `validate_preview()`
    - Step 5: Return the validation result

    Args:
        carriers (TokenCarriers): tokens found in the request path and query.

    Returns:
        ValidationResult: valid results carry the URL to redirect to.
    """
    # 1- Nothing to decode
    selected = select_carrier(carriers)
    if selected is None:
        logger.debug('No token carrier present in request.')
        return ValidationResult.fail(ErrorReason.NO_TOKEN)

    # 2- Carrier chosen by precedence
    carrier, token = selected
    ignored = [c.value for c in carriers.present() if c is not carrier]
    if ignored:
        logger.debug('Several token carriers present; using %s.', carrier.value, extra={'ignored': ignored})

    # 3- Decode the token
    try:
        decoded = DECODERS[carrier](token)
    except DecodeError as e:
        logger.info('Failed to decode token.', extra={'carrier': carrier.value, 'reason': str(e)})
        return ValidationResult.fail(ErrorReason.MALFORMED_TOKEN)

    # 4- Validate before anyone redirects to it
    return validate_preview(decoded)
