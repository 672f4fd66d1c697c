"""Exceptions raised by the architecture scanner."""


class ArchscanError(Exception):
    """Base class for archscan errors."""

    pass


class ModelError(ArchscanError):
    """Raised when an operation would break the architecture model."""

    pass


class DuplicateElementError(ModelError):
    """Raised when an element name is already taken in its namespace."""

    pass


class ConfigurationError(ArchscanError):
    """Raised when the scanner or the model hierarchy is misconfigured.

    This covers, for example:
    - a component finder without a container
    - a component that is not owned by a container
    """

    pass


class MetadataError(ArchscanError):
    """Base class for type metadata errors."""

    pass


class TypeNotFoundError(MetadataError):
    """Raised when the metadata source cannot load a type by name."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f'The type "{type_name}" could not be found.')
        self.type_name = type_name


class MetadataSourceUnavailableError(MetadataError):
    """Raised when the metadata source itself cannot be used."""

    pass


class WorkspaceFormatError(ArchscanError):
    """Raised when a workspace document cannot be parsed."""

    pass
