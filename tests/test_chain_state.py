"""
Tests for ChainStateReader.
"""

import pytest
from web3.exceptions import ContractLogicError, Web3RPCError

from tokentransfer import (
    ChainQueryError,
    ChainStateReader,
    GasEstimationError,
    BuildError,
    InvalidAddress,
    ReceiptStatus,
    TransactionBuilder,
)

from .conftest import CHAIN_ID, RECIPIENT, SENDER, TOKEN, TX_HASH, StubEth, StubWeb3, receipt_dict


@pytest.fixture
def draft():
    return TransactionBuilder(chain_id=CHAIN_ID, token_address=TOKEN).build(SENDER, RECIPIENT, 100, 5, 20)


class TestNonce:
    @pytest.mark.asyncio
    async def test_reads_pending_count(self, w3: StubWeb3, eth: StubEth) -> None:
        nonce = await ChainStateReader(w3).get_nonce(SENDER.lower())

        assert nonce == 5
        eth.get_transaction_count.assert_awaited_once_with(SENDER, "pending")

    @pytest.mark.asyncio
    async def test_never_cached(self, w3: StubWeb3, eth: StubEth) -> None:
        reader = ChainStateReader(w3)
        eth.get_transaction_count.side_effect = [5, 6]

        assert await reader.get_nonce(SENDER) == 5
        assert await reader.get_nonce(SENDER) == 6
        assert eth.get_transaction_count.await_count == 2

    @pytest.mark.asyncio
    async def test_network_error(self, w3: StubWeb3, eth: StubEth) -> None:
        eth.get_transaction_count.side_effect = ConnectionError("connection reset")

        with pytest.raises(ChainQueryError) as exc_info:
            await ChainStateReader(w3).get_nonce(SENDER)

        assert exc_info.value.operation == "eth_getTransactionCount"
        assert exc_info.value.retry_safe is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad", [None, -1, "5", True])
    async def test_malformed_result(self, w3: StubWeb3, eth: StubEth, bad) -> None:
        eth.get_transaction_count.return_value = bad

        with pytest.raises(ChainQueryError, match="malformed"):
            await ChainStateReader(w3).get_nonce(SENDER)

    @pytest.mark.asyncio
    async def test_invalid_address_before_rpc(self, w3: StubWeb3, eth: StubEth) -> None:
        with pytest.raises(InvalidAddress):
            await ChainStateReader(w3).get_nonce("0xdead")
        eth.get_transaction_count.assert_not_awaited()


class TestGasPrice:
    @pytest.mark.asyncio
    async def test_reads_gas_price(self, w3: StubWeb3) -> None:
        assert await ChainStateReader(w3).get_gas_price() == 20

    @pytest.mark.asyncio
    async def test_error(self) -> None:
        w3 = StubWeb3(StubEth(gas_price=TimeoutError("timed out")))

        with pytest.raises(ChainQueryError) as exc_info:
            await ChainStateReader(w3).get_gas_price()
        assert exc_info.value.operation == "eth_gasPrice"


class TestEstimateGas:
    @pytest.mark.asyncio
    async def test_estimates_draft_call(self, w3: StubWeb3, eth: StubEth, draft) -> None:
        assert await ChainStateReader(w3).estimate_gas(draft) == 60_000

        params = eth.estimate_gas.await_args.args[0]
        assert params["from"] == SENDER
        assert params["to"] == TOKEN
        assert params["value"] == 0
        assert params["data"].startswith("0xa9059cbb")
        assert "gas" not in params

    @pytest.mark.asyncio
    async def test_contract_revert(self, w3: StubWeb3, eth: StubEth, draft) -> None:
        eth.estimate_gas.side_effect = ContractLogicError(
            "execution reverted: ERC20: transfer amount exceeds balance"
        )

        with pytest.raises(GasEstimationError) as exc_info:
            await ChainStateReader(w3).estimate_gas(draft)

        assert isinstance(exc_info.value, BuildError)
        assert "exceeds balance" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_rpc_revert_message(self, w3: StubWeb3, eth: StubEth, draft) -> None:
        eth.estimate_gas.side_effect = Web3RPCError(
            "execution reverted",
            rpc_response={"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted"}},
        )

        with pytest.raises(GasEstimationError):
            await ChainStateReader(w3).estimate_gas(draft)

    @pytest.mark.asyncio
    async def test_legacy_value_error_revert(self, w3: StubWeb3, eth: StubEth, draft) -> None:
        revert_data = (
            "0x08c379a0"
            + "0000000000000000000000000000000000000000000000000000000000000020"
            + "0000000000000000000000000000000000000000000000000000000000000004"
            + "6e6f706500000000000000000000000000000000000000000000000000000000"
        )
        eth.estimate_gas.side_effect = ValueError(
            {"code": 3, "message": "execution reverted", "data": revert_data}
        )

        with pytest.raises(GasEstimationError) as exc_info:
            await ChainStateReader(w3).estimate_gas(draft)

        assert exc_info.value.reason == "execution reverted: nope"

    @pytest.mark.asyncio
    async def test_transport_error_is_not_revert(self, w3: StubWeb3, eth: StubEth, draft) -> None:
        eth.estimate_gas.side_effect = ConnectionError("refused")

        with pytest.raises(ChainQueryError) as exc_info:
            await ChainStateReader(w3).estimate_gas(draft)
        assert exc_info.value.operation == "eth_estimateGas"

    @pytest.mark.asyncio
    async def test_zero_estimate(self, w3: StubWeb3, eth: StubEth, draft) -> None:
        eth.estimate_gas.return_value = 0

        with pytest.raises(ChainQueryError):
            await ChainStateReader(w3).estimate_gas(draft)


class TestReceipt:
    @pytest.mark.asyncio
    async def test_success(self, w3: StubWeb3) -> None:
        receipt = await ChainStateReader(w3).get_receipt(TX_HASH)

        assert receipt.status is ReceiptStatus.SUCCESS
        assert receipt.block_number == 100
        assert receipt.block_hash == "0x" + "01" * 32
        assert receipt.tx_hash == TX_HASH

    @pytest.mark.asyncio
    async def test_failure_status(self, w3: StubWeb3, eth: StubEth) -> None:
        eth.get_transaction_receipt.return_value = receipt_dict(status=0)

        receipt = await ChainStateReader(w3).get_receipt(TX_HASH)
        assert receipt.status is ReceiptStatus.FAILURE

    @pytest.mark.asyncio
    async def test_not_found_is_none(self, w3: StubWeb3, eth: StubEth) -> None:
        eth.receipts(None)
        assert await ChainStateReader(w3).get_receipt(TX_HASH) is None

    @pytest.mark.asyncio
    async def test_malformed_receipt(self, w3: StubWeb3, eth: StubEth) -> None:
        eth.get_transaction_receipt.return_value = {"status": 7, "blockNumber": 1}

        with pytest.raises(ChainQueryError) as exc_info:
            await ChainStateReader(w3).get_receipt(TX_HASH)
        assert exc_info.value.operation == "eth_getTransactionReceipt"
