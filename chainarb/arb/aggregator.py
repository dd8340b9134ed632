"""
Price Aggregator.

Queries one price source per chain concurrently and returns exactly one
entry per requested chain: a ChainQuote, or None when that chain failed,
timed out, or had no positive price. One chain failing never fails the scan.
"""

import asyncio
from typing import Iterable, Optional

from chainarb.core.errors import ProviderError
from chainarb.core.logging import LoggerMixin
from chainarb.domain.models import Chain, ChainQuote, normalize_chains, validate_token_id
from chainarb.providers.base import BaseProvider


class PriceAggregator(LoggerMixin):
    """
    Fan-out quote fetcher with a per-chain deadline.
    """

    def __init__(self, provider: BaseProvider, chain_timeout: Optional[float] = None):
        """
        Initialize aggregator.

        Args:
            provider: Price source queried once per chain
            chain_timeout: Seconds before a chain is treated as absent.
                Defaults to settings.chain_timeout.
        """
        self.provider = provider
        self.chain_timeout = chain_timeout or provider.settings.chain_timeout

    async def fetch_quotes(
        self,
        token_id: str,
        chains: Iterable["str | Chain"],
    ) -> dict[Chain, Optional[ChainQuote]]:
        """
        Fetch the token's quote on every requested chain.

        Args:
            token_id: Contract address or coin id
            chains: Chains to query

        Returns:
            Dict of chain -> ChainQuote or None, in canonical chain order

        Raises:
            InvalidInputError: Empty token id or empty/unknown chains
        """
        token_id = validate_token_id(token_id)
        chain_list = normalize_chains(chains)

        self.logger.info(
            f"Fetching {token_id} quotes on {len(chain_list)} chains via {self.provider.name}"
        )
        results = await asyncio.gather(
            *(self._fetch_one(token_id, chain) for chain in chain_list)
        )
        quotes = dict(zip(chain_list, results))

        missing = [c.value for c, q in quotes.items() if q is None]
        if missing:
            self.logger.info(f"No quote for {token_id} on: {', '.join(missing)}")
        return quotes

    def fetch_quotes_sync(
        self,
        token_id: str,
        chains: Iterable["str | Chain"],
    ) -> dict[Chain, Optional[ChainQuote]]:
        """Blocking wrapper around fetch_quotes()."""
        return asyncio.run(self._fetch_and_close(token_id, chains))

    async def aclose(self) -> None:
        await self.provider.aclose()

    async def _fetch_and_close(self, token_id, chains):
        try:
            return await self.fetch_quotes(token_id, chains)
        finally:
            await self.aclose()

    async def _fetch_one(self, token_id: str, chain: Chain) -> Optional[ChainQuote]:
        """Fetch one chain; every failure degrades to None."""
        if not self.provider.supports(chain):
            self.logger.warning(f"{self.provider.name} does not support {chain.value}")
            return None

        try:
            quote = await asyncio.wait_for(
                self.provider.fetch_quote(token_id, chain),
                timeout=self.chain_timeout,
            )
        except asyncio.TimeoutError:
            self.logger.warning(
                f"{chain.value}: quote timed out after {self.chain_timeout:.1f}s"
            )
            return None
        except ProviderError as e:
            self.logger.warning(f"{chain.value}: {e.code} {e.message}")
            return None
        except Exception as e:
            self.logger.error(f"{chain.value}: unexpected quote failure: {e}", exc_info=True)
            return None

        if quote is None or quote.price <= 0:
            return None
        if quote.chain != chain:
            self.logger.warning(
                f"{chain.value}: provider returned a quote for {quote.chain.value}, ignoring"
            )
            return None
        return quote
