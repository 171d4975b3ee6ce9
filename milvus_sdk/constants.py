"""
Limits and defaults shared by the request parameters.

All durations are in seconds.
"""

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 19530

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_KEEP_ALIVE_TIMEOUT = 20.0
DEFAULT_IDLE_TIMEOUT = 24 * 60 * 60.0

DEFAULT_PARTITION = "_default"
DEFAULT_SHARDS_NUM = 2

DEFAULT_WAITING_INTERVAL = 0.5

MAX_WAITING_LOADING_INTERVAL = 2.0
MAX_WAITING_LOADING_TIMEOUT = 300.0
DEFAULT_WAITING_LOADING_TIMEOUT = 60.0

MAX_WAITING_FLUSHING_INTERVAL = 2.0
MAX_WAITING_FLUSHING_TIMEOUT = 300.0
DEFAULT_WAITING_FLUSHING_TIMEOUT = 60.0

MAX_WAITING_INDEX_INTERVAL = 2.0
MAX_WAITING_INDEX_TIMEOUT = 3600.0
DEFAULT_WAITING_INDEX_TIMEOUT = 600.0

# Keys understood by the server inside search / index parameter pairs.
VECTOR_FIELD = "anns_field"
VECTOR_DIM = "dim"
TOP_K = "topk"
INDEX_TYPE = "index_type"
METRIC_TYPE = "metric_type"
ROUND_DECIMAL = "round_decimal"
PARAMS = "params"

DEFAULT_SEARCH_PARAMS = "{}"
DEFAULT_INDEX_PARAMS = "{}"
DEFAULT_ROUND_DECIMAL = -1
MAX_ROUND_DECIMAL = 6
