"""
Template forge: ledger-side state machine for requesting code generations,
minting them as template tokens, and trading and rating those tokens.
"""

__version__ = "0.1.0"
