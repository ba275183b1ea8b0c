from fastapi import HTTPException


class UnauthorizedException(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=401, detail=detail)


class JokeNotFoundException(HTTPException):
    """Carries the message shown on the page alongside the transport detail."""

    def __init__(self, detail: str = "No random joke found", message: str = "There are no jokes to display."):
        super().__init__(status_code=404, detail=detail)
        self.message = message
