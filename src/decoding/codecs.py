# Message codecs: turn a raw log event payload into zero or more records.

from abc import ABC, abstractmethod
from typing import Dict, Any, Iterator, List, Union
import json
import logging

from utils.errors import ConfigError, DecodeError


class Codec(ABC):
    """
    A payload is split into units; each unit decodes independently into
    records, so one malformed unit does not spoil the rest of the payload.
    """

    name = 'base'

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def toText(self, message: Union[str, bytes]) -> str:
        if isinstance(message, bytes):
            try:
                return message.decode(self.config.get('charset', 'utf-8'))
            except UnicodeDecodeError as e:
                raise DecodeError(f"Payload is not valid {self.config.get('charset', 'utf-8')}: {e}") from e
        return message

    def split(self, message: Union[str, bytes]) -> Iterator[str]:
        yield self.toText(message)

    @abstractmethod
    def decodeUnit(self, unit: str) -> List[Dict[str, Any]]:
        pass

    def decode(self, message: Union[str, bytes]) -> Iterator[Dict[str, Any]]:
        for unit in self.split(message):
            yield from self.decodeUnit(unit)


class PlainCodec(Codec):
    name = 'plain'

    def decodeUnit(self, unit: str) -> List[Dict[str, Any]]:
        return [{'message': unit}]


class JsonCodec(Codec):
    name = 'json'

    def decodeUnit(self, unit: str) -> List[Dict[str, Any]]:
        try:
            parsed = json.loads(unit)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON: {e}") from e

        # A top-level array produces one record per element
        if isinstance(parsed, dict):
            return [parsed]
        if isinstance(parsed, list) and all(isinstance(item, dict) for item in parsed):
            return parsed

        raise DecodeError(f"Expected a JSON object or array of objects, got {type(parsed).__name__}")


class JsonLinesCodec(JsonCodec):
    name = 'json_lines'

    def split(self, message: Union[str, bytes]) -> Iterator[str]:
        for line in self.toText(message).splitlines():
            if line.strip():
                yield line


CODECS = {
    codec.name: codec
    for codec in (PlainCodec, JsonCodec, JsonLinesCodec)
}


def createCodec(name: str = 'plain', config: Dict[str, Any] = None) -> Codec:
    codecClass = CODECS.get(name)
    if codecClass is None:
        raise ConfigError(f"Unknown codec '{name}', expected one of {sorted(CODECS)}")
    return codecClass(config)
