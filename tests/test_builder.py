"""
Tests for TransactionBuilder and transfer call data.
"""

import pytest

from tokentransfer import BuildError, InvalidAddress, InvalidAmount, TransactionBuilder
from tokentransfer.abi import TRANSFER_SELECTOR, decode_transfer_call, encode_transfer_call
from tokentransfer.constants import MAX_GAS_LIMIT

from .conftest import CHAIN_ID, RECIPIENT, SENDER, TOKEN


@pytest.fixture
def token_builder() -> TransactionBuilder:
    return TransactionBuilder(chain_id=CHAIN_ID, token_address=TOKEN)


@pytest.fixture
def native_builder() -> TransactionBuilder:
    return TransactionBuilder(chain_id=CHAIN_ID)


class TestTransferCallData:
    def test_selector(self) -> None:
        assert TRANSFER_SELECTOR.hex() == "a9059cbb"

    def test_layout(self) -> None:
        data = encode_transfer_call(RECIPIENT, 1_000_000)

        assert len(data) == 4 + 32 + 32
        assert data[4 + 12:4 + 32] == bytes.fromhex(RECIPIENT[2:])
        assert int.from_bytes(data[36:], "big") == 1_000_000

    def test_decode(self) -> None:
        assert decode_transfer_call(encode_transfer_call(RECIPIENT, 7)) == (RECIPIENT, 7)

    def test_decode_rejects_other_calls(self) -> None:
        with pytest.raises(ValueError):
            decode_transfer_call(b"\x09\x5e\xa7\xb3" + b"\x00" * 64)


class TestBuild:
    def test_token_transfer_targets_contract(self, token_builder: TransactionBuilder) -> None:
        tx = token_builder.build(SENDER, RECIPIENT, 1_000, nonce=5, gas_price=20, gas_limit=60_000)

        assert tx.recipient == TOKEN
        assert tx.value == 0
        assert tx.is_contract_call
        assert decode_transfer_call(tx.payload) == (RECIPIENT, 1_000)
        assert (tx.nonce, tx.gas_price, tx.gas_limit, tx.chain_id) == (5, 20, 60_000, CHAIN_ID)

    def test_native_transfer_moves_value(self, native_builder: TransactionBuilder) -> None:
        tx = native_builder.build(SENDER, RECIPIENT, 10**18, nonce=0, gas_price=1, gas_limit=21_000)

        assert tx.recipient == RECIPIENT
        assert tx.value == 10**18
        assert tx.payload == b""
        assert not tx.is_contract_call

    def test_is_deterministic(self, token_builder: TransactionBuilder) -> None:
        args = (SENDER, RECIPIENT.lower(), 12_345, 5, 20, 60_000)
        first = token_builder.build(*args)
        second = token_builder.build(*args)

        assert first == second
        assert first.encode() == second.encode()
        assert first.signing_hash() == second.signing_hash()

    def test_normalizes_addresses(self, token_builder: TransactionBuilder) -> None:
        tx = token_builder.build(SENDER.lower(), RECIPIENT.lower(), 1, 0, 1)
        assert tx.sender == SENDER
        assert decode_transfer_call(tx.payload)[0] == RECIPIENT

    def test_draft_has_zero_gas(self, token_builder: TransactionBuilder) -> None:
        assert token_builder.build(SENDER, RECIPIENT, 1, 0, 1).gas_limit == 0

    def test_rejects_invalid_recipient(self, token_builder: TransactionBuilder) -> None:
        with pytest.raises(InvalidAddress) as exc_info:
            token_builder.build(SENDER, "0x1234", 1, 0, 1)
        assert exc_info.value.field == "recipient"

    def test_rejects_invalid_contract(self) -> None:
        with pytest.raises(InvalidAddress) as exc_info:
            TransactionBuilder(chain_id=CHAIN_ID, token_address="0xnot-a-contract")
        assert exc_info.value.field == "token_address"

    def test_rejects_negative_amount(self, token_builder: TransactionBuilder) -> None:
        with pytest.raises(InvalidAmount):
            token_builder.build(SENDER, RECIPIENT, -5, 0, 1)

    def test_rejects_zero_native_amount(self, native_builder: TransactionBuilder) -> None:
        with pytest.raises(InvalidAmount, match="must move value"):
            native_builder.build(SENDER, RECIPIENT, 0, 0, 1)

    def test_zero_token_amount_is_a_call(self, token_builder: TransactionBuilder) -> None:
        tx = token_builder.build(SENDER, RECIPIENT, 0, 0, 1)

        assert tx.value == 0
        assert decode_transfer_call(tx.payload) == (RECIPIENT, 0)

    @pytest.mark.parametrize(
        "nonce, gas_price, gas_limit",
        [(-1, 1, 0), (0, -1, 0), (0, 1, -1), (0, 1, MAX_GAS_LIMIT + 1), (2**64 - 1, 1, 0)],
    )
    def test_rejects_out_of_range_fields(self, token_builder, nonce, gas_price, gas_limit) -> None:
        with pytest.raises(BuildError):
            token_builder.build(SENDER, RECIPIENT, 1, nonce, gas_price, gas_limit)

    def test_rejects_bad_chain_id(self) -> None:
        with pytest.raises(BuildError):
            TransactionBuilder(chain_id=0)


class TestFinalize:
    def test_sets_gas_limit(self, token_builder: TransactionBuilder) -> None:
        draft = token_builder.build(SENDER, RECIPIENT, 1, 5, 20)
        tx = token_builder.finalize(draft, 60_000)

        assert tx.gas_limit == 60_000
        assert draft.gas_limit == 0
        assert tx.payload == draft.payload

    @pytest.mark.parametrize("gas_limit", [0, -1, MAX_GAS_LIMIT + 1])
    def test_rejects_bad_gas_limit(self, token_builder: TransactionBuilder, gas_limit: int) -> None:
        draft = token_builder.build(SENDER, RECIPIENT, 1, 5, 20)
        with pytest.raises(BuildError):
            token_builder.finalize(draft, gas_limit)

    def test_gas_buffer(self) -> None:
        assert TransactionBuilder.apply_gas_buffer(60_000) == 60_000
        assert TransactionBuilder.apply_gas_buffer(60_000, 1.5) == 90_000
        assert TransactionBuilder.apply_gas_buffer(MAX_GAS_LIMIT, 2.0) == MAX_GAS_LIMIT
