class MessengerError(Exception):
    """Raised when the messaging platform rejects or fails an outbound call"""

    def __init__(self, message, method=None, status_code=None):
        super().__init__(message)
        self.method = method
        self.status_code = status_code
