from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class NotFoundError(APIException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)

class ForbiddenActionError(APIException):
    def __init__(self, detail: str = "You are not allowed to perform this action"):
        super().__init__(status_code=403, detail=detail)

class ValidationFailedError(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=422, detail=detail)

class InvalidTransitionError(APIException):
    """Raised when an appointment action is not legal from its current state."""

    def __init__(self, current: str, actor: str, action: str, detail: str = None):
        self.current = current
        self.actor = actor
        self.action = action
        message = detail or f"Cannot {action.replace('_', ' ')} an appointment that is {current} (requested by {actor})"
        super().__init__(status_code=409, detail=message)

class BookingBlockedError(APIException):
    def __init__(self, title: str, detail: str):
        self.title = title
        super().__init__(status_code=409, detail=f"{title}: {detail}")

class BookingRejectedError(APIException):
    """The chosen technician cannot take this booking."""

    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class AlreadyRatedError(APIException):
    def __init__(self, detail: str = "This repair has already been rated"):
        super().__init__(status_code=409, detail=detail)

class RegistrationStateError(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class UploadRejectedError(APIException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class AvailabilityBlockedError(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=409, detail=detail)

class OngoingRepairError(APIException):
    def __init__(self, detail: str = "You have an ongoing repair that needs to be completed first. Please finish your current repair before starting a new one."):
        super().__init__(status_code=409, detail=detail)

class PersistenceError(APIException):
    def __init__(self, action: str = "Operation"):
        super().__init__(status_code=500, detail=f"{action} failed, please try again")

def create_error_response(error_message: str, status_code: int = 400) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    # Convert 403 from HTTPBearer to 401 for missing authentication
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return JSONResponse(
            status_code=401,
            content=create_error_response("Authentication required", 401)
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, exc.status_code)
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic errors into the same envelope as HTTPException"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=422, content=create_error_response(message, 422))
