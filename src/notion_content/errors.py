"""Exceptions raised by the content-sync engine.

Network and API failures are not wrapped: errors from notion_client
(APIResponseError, HTTPResponseError, RequestTimeoutError) reach the caller
unchanged, as do filesystem OSErrors from the cache and image mirror.
"""


class ConfigurationError(ValueError):
    """A required setting (API token, data source ID) is missing."""


class BlockDepthExceededError(RuntimeError):
    """A block tree is nested deeper than the resolver allows.

    Attributes:
        block_id: ID of the block whose children would exceed the limit.
        max_depth: The configured depth limit.
    """

    def __init__(self, block_id: str, max_depth: int):
        self.block_id = block_id
        self.max_depth = max_depth
        super().__init__(
            f"Block {block_id} exceeds maximum nesting depth of {max_depth}"
        )
