class MalformedUpdateError(Exception):
    """Raised when an inbound update lacks the fields the dispatcher needs"""

    def __init__(self, message, chat_id=None, callback_id=None):
        super().__init__(message)
        self.chat_id = chat_id
        self.callback_id = callback_id
