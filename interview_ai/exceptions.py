class InterviewAIError(Exception):
    """Base exception for the interview pipeline."""
    pass

class RemoteUnavailable(InterviewAIError):
    """Remote inference call timed out, failed or returned a non-success status."""
    pass

class ParseFailure(InterviewAIError):
    """Remote response did not contain the expected shape."""
    pass
