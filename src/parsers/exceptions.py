"""Provider-level exceptions. Never escape the aggregator."""


class UpstreamUnavailable(Exception):
    """An upstream provider could not serve a request.

    Raised by fallback steps when a client returned nothing usable.
    The fallback chain runner catches it and moves to the next provider.
    """

    def __init__(self, provider: str, message: str = "no usable data") -> None:
        self.provider = provider
        self.message = message
        super().__init__(f"[{provider}] {message}")
