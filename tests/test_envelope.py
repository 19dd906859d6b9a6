"""
Tests for the bytecode envelope module.
"""
import pytest

from umi_deploy.envelope import (
    BytecodeKind, bytecode_to_bytes, decode_envelope, encode_envelope, wrap_bytecode
)
from umi_deploy.exceptions import EncodingError
from tests.test_helpers import TEST_BYTECODE


class TestEncodeEnvelope:
    """Test envelope encoding."""

    def test_evm_contract_layout(self):
        """Tag byte, length, then the payload."""
        assert encode_envelope(bytes.fromhex("6080")) == bytes.fromhex("02026080")

    def test_hex_string_with_and_without_prefix(self):
        assert encode_envelope("0x6080") == encode_envelope("6080") == bytes.fromhex("02026080")

    def test_other_variant_tags(self):
        assert encode_envelope(b"\x01", BytecodeKind.SCRIPT)[0] == 0
        assert encode_envelope(b"\x01", BytecodeKind.MODULE)[0] == 1

    def test_multi_byte_length_prefix(self):
        """Lengths of 128 and above use ULEB128 continuation bytes."""
        code = b"\xaa" * 200
        envelope = encode_envelope(code)
        assert envelope[:3] == bytes([0x02, 0xC8, 0x01])
        assert envelope[3:] == code

    def test_deterministic(self):
        assert encode_envelope(TEST_BYTECODE) == encode_envelope(TEST_BYTECODE)

    @pytest.mark.parametrize("bad", ["", "0x", b""])
    def test_empty_bytecode(self, bad):
        with pytest.raises(EncodingError, match="empty"):
            encode_envelope(bad)

    @pytest.mark.parametrize("bad", ["0xzz", "608", "not bytecode"])
    def test_invalid_hex(self, bad):
        with pytest.raises(EncodingError, match="not valid hex"):
            encode_envelope(bad)

    def test_wrong_type(self):
        with pytest.raises(EncodingError):
            bytecode_to_bytes(1234)


class TestDecodeEnvelope:
    """Test envelope decoding."""

    def test_decode_recovers_payload(self):
        code = bytes.fromhex(TEST_BYTECODE[2:])
        kind, payload = decode_envelope(encode_envelope(code))
        assert kind is BytecodeKind.EVM_CONTRACT
        assert payload == code

    def test_decode_hex_input(self):
        kind, payload = decode_envelope("0x02026080")
        assert kind is BytecodeKind.EVM_CONTRACT
        assert payload == bytes.fromhex("6080")

    def test_unknown_tag(self):
        with pytest.raises(EncodingError, match="Unknown envelope variant"):
            decode_envelope(bytes.fromhex("05016080"))

    def test_truncated_payload(self):
        with pytest.raises(EncodingError, match="declares 4 payload bytes"):
            decode_envelope(bytes.fromhex("02046080"))

    def test_trailing_bytes(self):
        with pytest.raises(EncodingError, match="trailing"):
            decode_envelope(bytes.fromhex("0201608000"))

    def test_truncated_length(self):
        with pytest.raises(EncodingError, match="Truncated"):
            decode_envelope(bytes.fromhex("0280"))


def test_wrap_bytecode_returns_prefixed_hex():
    wrapped = wrap_bytecode(TEST_BYTECODE)
    assert wrapped.startswith("0x02")
    assert decode_envelope(wrapped)[1] == bytes.fromhex(TEST_BYTECODE[2:])
