"""Domain exception hierarchy."""


class DomainException(Exception):
    pass


class TileLoadException(DomainException):
    """A tile file could not be opened; nothing is stored."""


class TileFormatException(TileLoadException):
    pass


class ManifestSchemaException(TileLoadException):
    pass


class TileLookupException(DomainException):
    pass


class TileNotLoadedException(TileLookupException):
    pass


class ResourceNotFoundException(TileLookupException):
    pass


class BlockNotFoundException(TileLookupException):
    pass


class ResourceMissingSrcException(DomainException):
    pass


class BlockReadException(DomainException):
    pass
