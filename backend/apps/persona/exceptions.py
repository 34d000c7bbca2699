class PersonaChatError(Exception):
    """Base error for the persona chat pipeline."""


class SessionTerminated(PersonaChatError):
    """The session lost its last connection while work was in flight."""

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} terminated")
        self.session_id = session_id


class IndexingError(PersonaChatError):
    """A batch of chat history could not be embedded."""
