"""Per-user thread directory on top of the key-value store."""

from .store import KeyValueStore

CURRENT_THREAD_NAMESPACE = "slackq-current-thread"
THREADS_NAMESPACE = "slackq-threads"


class ThreadDirectory:
    """Tracks each user's thread ids and which one is current.

    Layout:
        slackq-current-thread[user_id] -> thread_id
        slackq-threads[user_id]        -> [thread_id, ...] newest first
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def current_thread(self, user_id: str) -> str | None:
        """Return the user's current thread id, if one is set."""
        value = self.store.get(CURRENT_THREAD_NAMESPACE, user_id)
        return str(value) if value else None

    def threads(self, user_id: str) -> list[str] | None:
        """Return the user's thread ids, or None if none were ever stored."""
        value = self.store.get(THREADS_NAMESPACE, user_id)
        if value is None:
            return None
        return [str(thread_id) for thread_id in value]

    def add_thread(self, user_id: str, thread_id: str) -> list[str]:
        """Prepend a thread id to the user's list and return the new list."""
        threads = [thread_id, *(self.threads(user_id) or [])]
        self.store.set(THREADS_NAMESPACE, user_id, threads)
        return threads

    def set_current(self, user_id: str, thread_id: str) -> None:
        self.store.set(CURRENT_THREAD_NAMESPACE, user_id, thread_id)

    def has_thread(self, user_id: str, thread_id: str) -> bool:
        return thread_id in (self.threads(user_id) or [])
