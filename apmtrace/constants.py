"""Wire keys, tag names and enumerations shared across the client."""

# Carrier formats
FORMAT_TEXT_MAP = "text_map"
FORMAT_HTTP_HEADERS = "http_headers"
FORMAT_BINARY = "binary"

# Carrier keys (matched case-insensitively on extract)
CARRIER_TRACE_ID = "TRACE_ID"
CARRIER_CORRELATION_ID = "CORRELATION_ID"
CARRIER_TRANSACTION = "TRANSACTION"
CARRIER_LEVEL = "LEVEL"

# Tags applied to the root span from deployment metadata
PROP_SERVICE_NAME = "service"
PROP_BUILD_STAMP = "buildStamp"

# Tags with special meaning on a span
TAG_TRANSACTION = "transaction"
TAG_SAMPLING_PRIORITY = "sampling.priority"

# Trace node types
NODE_TYPE_CONSUMER = "Consumer"
NODE_TYPE_PRODUCER = "Producer"
NODE_TYPE_COMPONENT = "Component"

# Correlation id scopes
CORR_ID_SCOPE_INTERACTION = "Interaction"
CORR_ID_SCOPE_CAUSED_BY = "CausedBy"

# Reporting levels
LEVEL_ALL = "All"
LEVEL_NONE = "None"

# Reference types
REFERENCE_CHILD_OF = "child_of"
REFERENCE_FOLLOWS_FROM = "follows_from"
