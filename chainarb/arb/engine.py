"""
Cross-Chain Arbitrage Engine.

Flow:
1. Validate: Reject bad token ids, chains and thresholds up front
2. Aggregate: Fetch the token's quote on every chain concurrently
3. Pair: Evaluate every ordered (buy, sell) pair of quoted chains
4. Cost: Deduct DEX fees, swap gas and bridge cost from gross profit
5. Score: Assign a risk tier
6. Rank: Sort by net profit, keep the top N, report the full count
"""

import asyncio
from itertools import permutations
from typing import Any, Iterable, Optional

from chainarb.arb.aggregator import PriceAggregator
from chainarb.arb.costs import CostModel
from chainarb.arb.risk import RiskScorer
from chainarb.core.config import Settings, get_arbitrage_config
from chainarb.core.logging import LoggerMixin
from chainarb.core.timeutil import format_timestamp, now_utc
from chainarb.providers.base import BaseProvider
from chainarb.providers.coingecko import CoinGeckoProvider
from chainarb.domain.models import (
    ArbitrageOpportunity,
    Chain,
    ChainQuote,
    CostBreakdown,
    RouteQuote,
    ScanRequest,
    ScanResult,
    normalize_chains,
    validate_min_profit,
    validate_notional,
    validate_token_id,
)

DEFAULT_MIN_PROFIT_USD = 50.0
DEFAULT_NOTIONAL_AMOUNT = 10000.0
DEFAULT_MAX_RESULTS = 10


class ArbitrageEngine(LoggerMixin):
    """
    Cross-chain arbitrage detection engine.

    Stateless between calls; the cost model and risk scorer are immutable
    configuration passed in at construction.
    """

    def __init__(
        self,
        aggregator: PriceAggregator,
        cost_model: Optional[CostModel] = None,
        risk_scorer: Optional[RiskScorer] = None,
        config: Optional[dict] = None,
    ):
        """
        Initialize arbitrage engine.

        Args:
            aggregator: Price aggregator
            cost_model: Fee/gas/bridge tables (built-in defaults if omitted)
            risk_scorer: Risk scorer (built-in thresholds if omitted)
            config: config.yaml['arbitrage'] for defaults and limits
        """
        config = config or {}
        self.aggregator = aggregator
        self.cost_model = cost_model or CostModel.default()
        self.risk_scorer = risk_scorer or RiskScorer()

        self.min_profit_usd = validate_min_profit(
            config.get("min_profit_usd", DEFAULT_MIN_PROFIT_USD)
        )
        self.notional_amount = validate_notional(
            config.get("notional_amount", DEFAULT_NOTIONAL_AMOUNT)
        )
        self.max_results = int(config.get("max_results", DEFAULT_MAX_RESULTS))
        self.default_chains = normalize_chains(config.get("default_chains"))

    # ==============================================
    # Pure computation
    # ==============================================

    def evaluate(
        self,
        buy: ChainQuote,
        sell: ChainQuote,
        notional_amount: Optional[float] = None,
        min_profit_usd: Optional[float] = None,
    ) -> Optional[ArbitrageOpportunity]:
        """
        Evaluate buying on one chain and selling on another.

        Args:
            buy: Quote on the chain to buy on
            sell: Quote on the chain to sell on
            notional_amount: Trade size (defaults to engine setting)
            min_profit_usd: Net profit must exceed this (defaults to engine setting)

        Returns:
            ArbitrageOpportunity, or None if the sell side is not higher or
            net profit does not exceed the threshold
        """
        if buy.chain == sell.chain:
            return None

        notional = self.notional_amount if notional_amount is None else notional_amount
        min_profit = self.min_profit_usd if min_profit_usd is None else min_profit_usd

        price_diff = sell.price - buy.price
        if price_diff <= 0:
            return None

        buy_cost = notional * buy.price
        sell_revenue = notional * sell.price
        gross_profit = sell_revenue - buy_cost

        bridge = self.cost_model.bridge(buy.chain, sell.chain)
        costs = CostBreakdown(
            buy_fee=buy_cost * self.cost_model.dex_fee(buy.chain) / 100,
            sell_fee=sell_revenue * self.cost_model.dex_fee(sell.chain) / 100,
            buy_gas=self.cost_model.swap_gas(buy.chain),
            sell_gas=self.cost_model.swap_gas(sell.chain),
            bridge_cost=bridge.cost,
        )

        net_profit = gross_profit - costs.total
        if net_profit <= min_profit:
            return None

        risk_level = self.risk_scorer.assess(
            profit_percentage=gross_profit / buy_cost * 100,
            bridge_time=bridge.time,
            buy_chain=buy.chain,
            sell_chain=sell.chain,
        )

        return ArbitrageOpportunity(
            buy_chain=buy.chain,
            sell_chain=sell.chain,
            buy_price=buy.price,
            sell_price=sell.price,
            price_difference=price_diff,
            gross_profit=gross_profit,
            costs=costs,
            net_profit=net_profit,
            net_profit_percentage=net_profit / buy_cost * 100,
            bridge_info=bridge,
            risk_level=risk_level,
            execution_time_minutes=bridge.time,
            notional_amount=notional,
        )

    def find_opportunities(
        self,
        quotes: dict[Chain, Optional[ChainQuote]],
        notional_amount: Optional[float] = None,
        min_profit_usd: Optional[float] = None,
    ) -> list[ArbitrageOpportunity]:
        """
        Evaluate every ordered pair of quoted chains.

        Returns:
            All qualifying opportunities, best net profit first
        """
        present = _present_quotes(quotes)
        opportunities = []
        for buy, sell in permutations(present, 2):
            opportunity = self.evaluate(buy, sell, notional_amount, min_profit_usd)
            if opportunity:
                opportunities.append(opportunity)

        opportunities.sort(key=lambda o: o.net_profit, reverse=True)
        return opportunities

    def build_routes(self, quotes: dict[Chain, Optional[ChainQuote]]) -> list[RouteQuote]:
        """
        Enumerate every ordered pair without filtering or cost netting.

        Returns:
            Routes sorted by raw profit percentage, highest first
        """
        present = _present_quotes(quotes)
        routes = []
        for src, dst in permutations(present, 2):
            price_diff = dst.price - src.price
            routes.append(
                RouteQuote(
                    from_chain=src.chain,
                    to_chain=dst.chain,
                    from_price=src.price,
                    to_price=dst.price,
                    price_diff=price_diff,
                    profit_percentage=price_diff / src.price * 100,
                    bridge_info=self.cost_model.bridge(src.chain, dst.chain),
                )
            )

        routes.sort(key=lambda r: r.profit_percentage, reverse=True)
        return routes

    # ==============================================
    # Queries
    # ==============================================

    async def ascan(
        self,
        token_id: str,
        chains: Optional[Iterable["str | Chain"]] = None,
        min_profit_usd: Optional[float] = None,
        notional_amount: Optional[float] = None,
    ) -> ScanResult:
        """
        Scan a token for cross-chain arbitrage.

        Args:
            token_id: Contract address or coin id
            chains: Chains to scan (engine default set if omitted)
            min_profit_usd: Minimum net profit in USD, never negative
            notional_amount: Trade size used for fee and profit scaling

        Returns:
            ScanResult with at most max_results opportunities

        Raises:
            InvalidInputError: Before any outbound call, on bad input
        """
        token_id = validate_token_id(token_id)
        chain_list = self.default_chains if chains is None else normalize_chains(chains)
        min_profit = (
            self.min_profit_usd if min_profit_usd is None else validate_min_profit(min_profit_usd)
        )
        notional = (
            self.notional_amount if notional_amount is None else validate_notional(notional_amount)
        )

        quotes = await self.aggregator.fetch_quotes(token_id, chain_list)
        present = {c: q for c, q in quotes.items() if q is not None}
        result = ScanResult(
            token_id=token_id,
            timestamp=format_timestamp(now_utc()),
            chains_scanned=len(present),
            prices=present,
        )

        if len(present) < 2:
            self.logger.info(
                f"{token_id}: only {len(present)} chain(s) quoted, nothing to compare"
            )
            return result

        opportunities = self.find_opportunities(present, notional, min_profit)
        result.total_opportunities = len(opportunities)
        result.opportunities = opportunities[: self.max_results]

        self.logger.info(
            f"{token_id}: {len(opportunities)} opportunities across "
            f"{len(present)} chains (min profit ${min_profit:,.2f})"
        )
        return result

    def scan(
        self,
        token_id: str,
        chains: Optional[Iterable["str | Chain"]] = None,
        min_profit_usd: Optional[float] = None,
        notional_amount: Optional[float] = None,
    ) -> ScanResult:
        """Blocking wrapper around ascan()."""
        return self._run(self.ascan(token_id, chains, min_profit_usd, notional_amount))

    def scan_request(self, request: "ScanRequest | dict[str, Any]") -> ScanResult:
        """Run a scan from a validated request or its wire-format dict."""
        if isinstance(request, dict):
            request = ScanRequest.from_dict(request)
        return self.scan(
            request.token_id,
            chains=request.chains,
            min_profit_usd=request.min_profit_usd,
            notional_amount=request.notional_amount,
        )

    async def alist_routes(
        self,
        token_id: str,
        chains: Optional[Iterable["str | Chain"]] = None,
    ) -> list[RouteQuote]:
        """
        List raw price gaps for every ordered chain pair.

        Raises:
            InvalidInputError: Before any outbound call, on bad input
        """
        token_id = validate_token_id(token_id)
        chain_list = self.default_chains if chains is None else normalize_chains(chains)
        quotes = await self.aggregator.fetch_quotes(token_id, chain_list)
        return self.build_routes(quotes)

    def list_routes(
        self,
        token_id: str,
        chains: Optional[Iterable["str | Chain"]] = None,
    ) -> list[RouteQuote]:
        """Blocking wrapper around alist_routes()."""
        return self._run(self.alist_routes(token_id, chains))

    def _run(self, coro):
        async def runner():
            try:
                return await coro
            finally:
                await self.aggregator.aclose()

        return asyncio.run(runner())


def _present_quotes(quotes: dict[Chain, Optional[ChainQuote]]) -> list[ChainQuote]:
    """Quoted chains with a positive price, in canonical chain order."""
    present = [q for q in quotes.values() if q is not None and q.price > 0]
    return sorted(present, key=lambda q: q.chain.order)


def create_engine(
    settings: Optional[Settings] = None,
    config: Optional[dict] = None,
    provider: Optional[BaseProvider] = None,
) -> ArbitrageEngine:
    """
    Build an engine from settings and config.yaml['arbitrage'].

    Falls back to built-in cost tables and thresholds when no config file
    is present.
    """
    if config is None:
        config = get_arbitrage_config()

    provider = provider or CoinGeckoProvider(settings=settings)
    aggregator = PriceAggregator(
        provider,
        chain_timeout=config.get("chain_timeout") or provider.settings.chain_timeout,
    )
    return ArbitrageEngine(
        aggregator=aggregator,
        cost_model=CostModel.from_config(config.get("cost_model")),
        risk_scorer=RiskScorer.from_config(config.get("risk")),
        config=config,
    )
