class LsctError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(LsctError):
    # errors related to configuration.
    pass

class ClassifierInitError(LsctError):
    # the classification backend could not be opened or its database loaded.
    pass

class ClassificationError(LsctError):
    # classification of a non-empty regular file failed.
    def __init__(self, path: bytes, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot classify \"{path.decode('utf-8', errors='replace')}\": {reason}")

class RootInaccessibleError(LsctError):
    # a root argument does not exist or cannot be read.
    def __init__(self, path: bytes, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"\"{path.decode('utf-8', errors='replace')}\": {reason}")

class NothingToListError(LsctError):
    # the walk finished without classifying a single entry.
    pass

class GroupingStoreError(LsctError):
    # the grouping store was used outside its add-then-drain lifecycle.
    pass

class OutputError(LsctError):
    # errors during output operations.
    pass
