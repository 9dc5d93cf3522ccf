"""
Error taxonomy for the StudyHub stores.
Every failure is a caller-input problem reported synchronously; nothing here is retried.
"""


class StudyHubError(Exception):
    """Base class, carries the HTTP status the API layer answers with"""
    status_code = 400

    def __init__(self, detail: str = None):
        self.detail = detail or self.__class__.__doc__ or self.__class__.__name__
        super().__init__(self.detail)

    @property
    def name(self) -> str:
        return self.__class__.__name__


class InvalidParticipants(StudyHubError):
    """A conversation needs at least two unique participants"""
    status_code = 400


class NotAParticipant(StudyHubError):
    """Peer is not a participant of this conversation"""
    status_code = 403


class EmptyBody(StudyHubError):
    """Message body is empty"""
    status_code = 400


class DuplicateId(StudyHubError):
    """Id already registered with different immutable fields"""
    status_code = 409


class OversizeFile(StudyHubError):
    """File exceeds the configured size limit"""
    status_code = 413


class UnsupportedType(StudyHubError):
    """File type is not allowed"""
    status_code = 415


class PeerNotFound(StudyHubError):
    """Peer not found"""
    status_code = 404


class ConversationNotFound(StudyHubError):
    """Conversation not found"""
    status_code = 404


class ResourceNotFound(StudyHubError):
    """Resource not found"""
    status_code = 404


class NotTheUploader(StudyHubError):
    """Only the uploader can remove a resource"""
    status_code = 403


class MessageNotFound(StudyHubError):
    """Message not found in this conversation"""
    status_code = 404
