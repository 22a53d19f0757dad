class FileRegistryError(Exception):
    """Base exception for file registry errors"""
    pass

class UnsupportedAttachmentError(FileRegistryError):
    """Raised when a message or stored record carries an attachment kind the bot cannot handle"""
    pass

class FileIntegrityError(FileRegistryError):
    """Raised when a stored file record cannot be read back"""
    pass
