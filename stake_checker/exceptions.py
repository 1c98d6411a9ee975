class StakeCheckerError(Exception):
    """Base class for errors raised by stake checker operations."""
    pass


class MalformedTimestampError(StakeCheckerError):
    """Raised when a timestamp is neither ISO-like nor epoch seconds."""
    pass


class NonIntegerValueError(StakeCheckerError):
    """Raised when a balance field is not an unsigned integer."""
    pass


class BalanceOverflowError(StakeCheckerError):
    """Raised when a balance does not fit in 64 bits before widening."""
    pass


class MalformedRecordError(StakeCheckerError):
    """Raised when a record is missing a field or has the wrong shape."""
    pass


class InvalidAccountIdentifierError(StakeCheckerError):
    """Raised when an SS58 address cannot be decoded into a 32 byte account id."""
    pass


class TruncatedInputError(StakeCheckerError):
    """Raised when encoded bytes are shorter than the layout being decoded."""
    pass


class NoDataFoundError(StakeCheckerError):
    """Raised when the node has no value stored under a key."""

    def __init__(self, message: str = "Did not find any data. Polkadot address unused?"):
        super().__init__(message)


class RPCError(StakeCheckerError):
    """Raised when the node answers a JSON-RPC call with an error member."""
    pass


class SubQueryError(StakeCheckerError):
    """Raised when the indexing service answers a query with errors."""
    pass


class MetadataDecodeError(StakeCheckerError):
    """Raised when state_getMetadata returns bytes that do not decode as runtime metadata."""
    pass
