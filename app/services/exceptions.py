class RateSyncError(Exception):
    """Base error for a single currency pair that could not be synchronized"""


class QuoteClientError(RateSyncError):
    """Quote provider unreachable, answered with an error or with malformed JSON"""


class QuoteParseError(RateSyncError):
    """Quote point carries a bid/ask that is not a usable number"""
