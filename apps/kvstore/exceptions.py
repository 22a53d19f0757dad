class KeyValueStoreError(Exception):
    """Base exception for key-value store errors"""
    pass

class ValueNotSerializableError(KeyValueStoreError):
    """Raised when a value cannot be stored as a JSON document"""
    pass
