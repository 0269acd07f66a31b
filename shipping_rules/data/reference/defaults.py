"""
Engine Defaults

Constants shared by the rule modules and the reference-data loaders.
"""

# Size class used when a cart line has no size class, or an unknown one
DEFAULT_SIZE_CLASS = "MEDIUM"
DEFAULT_WEIGHT_POINTS = 2

# Add-on options, in pricing order
OPTION_CODES = ("insurance", "signature", "gift_wrap")

# Method capability flag for each option code
OPTION_CAPABILITY = {
    "insurance": "supports_insurance",
    "signature": "supports_signature",
    "gift_wrap": "supports_gift_wrap",
}

# Fulfillment preferences
SINGLE = "single"
SPLIT = "split"
SHIPMENT_PREFERENCES = (SINGLE, SPLIT)

# Refresh interval for cached context snapshots (seconds)
CONTEXT_TTL_SECONDS = 10 * 60
