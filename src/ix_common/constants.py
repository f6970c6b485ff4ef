"""Protocol-wide constants."""

SECONDS_IN_HOUR = 60 * 60
SECONDS_IN_DAY = SECONDS_IN_HOUR * 24

# Fee percentages are fixed-point with 18 decimals: 10**18 == 100%
PCT_BASE = 10**18

SUMMARY_ID = "SUMMARY"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
