from typing import Optional


class RelayError(Exception):
    """
    Base error for the relay.
    Carries internal detail for the log and an i18n key for the caller.
    """
    status_code = 500
    message_key = "error.internal"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or ""
        super().__init__(self.detail or self.message_key)


class MissingParameter(RelayError):
    status_code = 400
    message_key = "error.missing_parameter"

    def __init__(self, detail: Optional[str] = None, message_key: Optional[str] = None):
        super().__init__(detail)
        if message_key:
            self.message_key = message_key


class InvalidUrl(RelayError):
    status_code = 400
    message_key = "error.invalid_url"


class UnsupportedPlatform(RelayError):
    status_code = 400
    message_key = "error.unsupported_platform"


class ExtractionFailed(RelayError):
    status_code = 500
    message_key = "error.analyze_failed"


class DownloadFailed(RelayError):
    status_code = 500
    message_key = "error.download_failed"


class StreamingFailed(RelayError):
    status_code = 500
    message_key = "error.streaming_failed"
