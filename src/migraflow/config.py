"""Configuration constants for migraflow."""

# Sankey layout defaults (pixels)
SANKEY_WIDTH = 1200
SANKEY_HEIGHT = 800
SANKEY_MARGIN = 20
SANKEY_NODE_WIDTH = 15
SANKEY_NODE_GAP = 2

# Timestamp given to single-snapshot CSV datasets with no usable period
DEFAULT_TIMESTAMP = 2021

# Upper bound on materialized GEXF years applied by the CLI
MAX_SNAPSHOT_YEARS = 500

# Environment variable read by the CLI for the log level
LOG_LEVEL_ENV = "MIGRAFLOW_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
