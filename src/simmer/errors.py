class SimmerError(Exception):
    """Base error for simmer domain exceptions."""


class StorageError(SimmerError):
    """Base exception for save/load errors."""


class StorageReadError(StorageError):
    """Raised when a save file is missing, unreadable or cannot be parsed."""


class SaveValidationError(StorageReadError):
    """Raised when save data parses but violates the record invariants."""


class StorageWriteError(StorageError):
    """Raised when a save file cannot be written."""


class CatalogError(SimmerError):
    """Raised when the recipe catalog data is invalid."""


class UnknownRecipeError(CatalogError):
    """Raised when a recipe id cannot be found in the catalog."""


class SettingsError(SimmerError):
    """Raised when a settings file contains unknown or invalid values."""
