"""
Bytecode envelope for Umi Network.

Umi runs the EVM next to MoveVM, so every deployment payload is wrapped in a
``ScriptOrDeployment`` enum telling the node which VM the bytes belong to.
The enum is BCS-serialized: a ULEB128 variant index followed by a
ULEB128-length-prefixed byte vector.
"""
import logging
from enum import IntEnum
from typing import Tuple, Union

from .exceptions import EncodingError

logger = logging.getLogger(__name__)


class BytecodeKind(IntEnum):
    """Variants of the ScriptOrDeployment enum, in declaration order."""
    SCRIPT = 0
    MODULE = 1
    EVM_CONTRACT = 2


def _uleb128_encode(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _uleb128_decode(data: bytes, offset: int) -> Tuple[int, int]:
    """Read a ULEB128 integer; returns (value, new_offset)."""
    value = 0
    shift = 0
    while True:
        if offset >= len(data):
            raise EncodingError("Truncated ULEB128 value in envelope")
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7
        # BCS caps lengths and indices at u32
        if shift > 28:
            raise EncodingError("ULEB128 value in envelope exceeds 32 bits")


def bytecode_to_bytes(bytecode: Union[str, bytes]) -> bytes:
    """
    Normalize bytecode to raw bytes.

    Args:
        bytecode: Raw bytes, or a hex string with or without 0x prefix

    Returns:
        Bytecode bytes

    Raises:
        EncodingError: If the bytecode is empty or not valid hex
    """
    if isinstance(bytecode, (bytes, bytearray)):
        code = bytes(bytecode)
    elif isinstance(bytecode, str):
        clean = bytecode[2:] if bytecode.startswith(('0x', '0X')) else bytecode
        try:
            code = bytes.fromhex(clean)
        except ValueError as e:
            raise EncodingError(f"Bytecode is not valid hex: {str(e)}")
    else:
        raise EncodingError(f"Bytecode must be bytes or a hex string, got {type(bytecode).__name__}")

    if not code:
        raise EncodingError("Bytecode is empty")
    return code


def encode_envelope(bytecode: Union[str, bytes], kind: BytecodeKind = BytecodeKind.EVM_CONTRACT) -> bytes:
    """
    Wrap bytecode in a ScriptOrDeployment envelope.

    Args:
        bytecode: Contract bytecode (bytes or hex string)
        kind: Envelope variant

    Returns:
        Serialized envelope bytes

    Raises:
        EncodingError: If the bytecode is empty or not valid hex
    """
    code = bytecode_to_bytes(bytecode)
    return _uleb128_encode(int(BytecodeKind(kind))) + _uleb128_encode(len(code)) + code


def decode_envelope(data: Union[str, bytes]) -> Tuple[BytecodeKind, bytes]:
    """
    Unwrap a ScriptOrDeployment envelope.

    Args:
        data: Envelope bytes, or hex string with or without 0x prefix

    Returns:
        Tuple of (variant, payload bytes)

    Raises:
        EncodingError: If the envelope is malformed
    """
    raw = bytecode_to_bytes(data)

    tag, offset = _uleb128_decode(raw, 0)
    try:
        kind = BytecodeKind(tag)
    except ValueError:
        raise EncodingError(f"Unknown envelope variant tag: {tag}")

    length, offset = _uleb128_decode(raw, offset)
    payload = raw[offset:offset + length]
    if len(payload) != length:
        raise EncodingError(f"Envelope declares {length} payload bytes but only {len(payload)} present")
    if offset + length != len(raw):
        raise EncodingError(f"{len(raw) - offset - length} trailing bytes after envelope payload")
    return kind, payload


def wrap_bytecode(bytecode: Union[str, bytes]) -> str:
    """
    Wrap EVM bytecode for Umi and return it as 0x-prefixed hex.

    This is the value that goes into the deployment transaction's ``data``.
    """
    envelope = encode_envelope(bytecode, BytecodeKind.EVM_CONTRACT)
    wrapped = "0x" + envelope.hex()
    logger.debug(f"Bytecode wrapped: {wrapped[:50]}...")
    return wrapped
