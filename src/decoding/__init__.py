"""
Decoding Module

Turns raw CloudWatch Logs message payloads into structured records.

Codecs:
- plain: the payload becomes the record's message field
- json: the payload is a JSON object (or an array of objects)
- json_lines: one JSON object per line
"""

from .codecs import Codec, PlainCodec, JsonCodec, JsonLinesCodec, createCodec

__all__ = [
    'Codec',
    'PlainCodec',
    'JsonCodec',
    'JsonLinesCodec',
    'createCodec',
]
