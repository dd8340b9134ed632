"""
ChainArb - Cross-chain token arbitrage scanner.

Quotes a token on several chains and ranks buy/bridge/sell opportunities
net of DEX fees, swap gas and bridge costs.
"""

__version__ = "0.1.0"
