class ResizerError(Exception):
    """
    Base error for the resize pipeline; rendered as a 400 with `message` as the body.
    Only the subclasses below are raised, the base message is a catch-all.
    """

    message = "Failed To Process Image"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# Fetch / source errors
class InvalidRequest(ResizerError):
    message = "Invalid Request For Image"


class InvalidPayload(ResizerError):
    message = "Invalid Image Payload"


class NotFound(ResizerError):
    message = "Image Not Found"


class InaccessibleImage(ResizerError):
    message = "Inaccessible Image"


class BlockedHost(ResizerError):
    message = "Image Host Is Not Allowed"


# Codec errors
class InvalidImage(ResizerError):
    message = "Invalid Image"


class InvalidFormat(ResizerError):
    message = "Invalid Format For Image"


class FailedWrite(ResizerError):
    message = "Failed To Write Image"
