from .storage import StorageEntry

__all_models = [StorageEntry]
