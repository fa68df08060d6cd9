from permaqr.encoding.codec import encode, decode, compression_ratio
from permaqr.encoding.legacy import decode_base64, decode_percent


__all__ = [
    'encode',
    'decode',
    'compression_ratio',
    'decode_base64',
    'decode_percent',
]
