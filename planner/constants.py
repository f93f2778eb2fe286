"""Protocol constants for conditional market planning."""

# Basis point denominator (10000 bps = 100%)
BPS_DENOMINATOR = 10_000

# Default slippage tolerance applied to swap quotes (100 bps = 1%)
DEFAULT_SLIPPAGE_BPS = 100

# Conditional vaults split into exactly two outcomes: PASS and FAIL
NUM_OUTCOMES = 2

# Operation plans never hold more than split + swap or the two redeem legs
MAX_PLAN_OPERATIONS = 2
