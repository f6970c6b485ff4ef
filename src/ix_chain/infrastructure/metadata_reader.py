"""Web3MetadataReader: reads ERC20 name/symbol/decimals over JSON-RPC.

Called once per subject token, when its Subject is first created. Any RPC
failure (timeout, revert, transport) is fatal to the event being processed:
there is no retry here, the driver re-delivers the batch.
"""

import logging
from typing import Any

from web3 import AsyncWeb3

from src.ix_chain.domain.models import TokenMetadata
from src.ix_common.errors import ContractReadError

logger = logging.getLogger(__name__)

_ERC20_METADATA_ABI: list[dict[str, Any]] = [
    {
        "name": "name",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "name": "symbol",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "name": "decimals",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
]


class Web3MetadataReader:
    """Concrete implementation of ContractMetadataReaderProtocol."""

    def __init__(
        self,
        rpc_url: str | None = None,
        timeout_seconds: float = 10.0,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        if w3 is None:
            if rpc_url is None:
                raise ValueError("either rpc_url or w3 is required")
            w3 = AsyncWeb3(
                AsyncWeb3.AsyncHTTPProvider(
                    rpc_url, request_kwargs={"timeout": timeout_seconds}
                )
            )
        self._w3 = w3

    async def name(self, token_address: str) -> str:
        return str(await self._call(token_address, "name"))

    async def symbol(self, token_address: str) -> str:
        return str(await self._call(token_address, "symbol"))

    async def decimals(self, token_address: str) -> int:
        return int(await self._call(token_address, "decimals"))

    async def read_metadata(self, token_address: str) -> TokenMetadata:
        return TokenMetadata(
            name=await self.name(token_address),
            symbol=await self.symbol(token_address),
            decimals=await self.decimals(token_address),
        )

    async def _call(self, token_address: str, function_name: str) -> Any:
        contract = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token_address),
            abi=_ERC20_METADATA_ABI,
        )
        try:
            return await getattr(contract.functions, function_name)().call()
        except Exception as exc:
            logger.error("%s() read failed on %s: %s", function_name, token_address, exc)
            raise ContractReadError(token_address, f"{function_name}() failed: {exc}") from exc
