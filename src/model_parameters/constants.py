"""Constants shared across model-parameters."""

# Reserved child id of a broadcaster's size parameter
BROADCAST_SIZE_ID: str = "broadcastsize"
BROADCAST_SIZE_NAME: str = "Number of items"
BROADCAST_SIZE_DESCRIPTION: str = "Number of items to be instantiated"

# Units string of a dimensionless leaf
NO_UNITS: str = "-"

# Separator for nested ids in CLI paths and flattened sample columns
PATH_SEP: str = "."
