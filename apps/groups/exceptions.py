# apps/groups/exceptions.py


class EntryServiceError(Exception): pass
class StoreError(EntryServiceError): pass


class EntryNotFound(EntryServiceError):
    def __init__(self, entry_id):
        super().__init__(f"Entry {entry_id} not found.")
        self.entry_id = entry_id


class EntryAlreadyExists(EntryServiceError):
    """Raised by a conditional create when another writer created the link first."""


class CooldownActive(EntryServiceError):
    def __init__(self, remaining_hours: int):
        super().__init__(
            "This link was submitted recently. "
            f"Please wait about {remaining_hours} more hour(s) before submitting it again."
        )
        self.remaining_hours = remaining_hours


class AlreadyRated(EntryServiceError):
    def __init__(self):
        super().__init__("You have already rated this group.")


class EntryChanged(EntryServiceError):
    """Raised when an entry was bumped by another request between read and write."""
