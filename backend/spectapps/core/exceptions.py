from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

class SpectAppsException(Exception):
    """Base exception for SpectApps application"""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class ValidationError(SpectAppsException):
    """Raised when validation fails"""
    def __init__(self, message: str = "Validation error"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)

class GenerationInProgressError(SpectAppsException):
    """Raised when a submission arrives while another one is in flight"""
    def __init__(self, message: str = "A video generation is already in progress"):
        super().__init__(message, status.HTTP_409_CONFLICT)

class GenerationError(SpectAppsException):
    """Base class for failures talking to the prediction API or reading its output"""
    def __init__(self, message: str = "Video generation failed"):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)

class ModelNotFoundError(GenerationError):
    """Raised when a model name has no resolvable version"""
    def __init__(self, message: str = "Model version not found"):
        super().__init__(message)

class SubmissionFailedError(GenerationError):
    """Raised when a prediction could not be created"""
    def __init__(self, message: str = "Video generation could not be started"):
        super().__init__(message)

class NetworkError(GenerationError):
    """Raised when a status request fails or returns an unreadable payload"""
    def __init__(self, message: str = "Network error"):
        super().__init__(message)

class NoURLFoundError(GenerationError):
    """Raised when prediction output holds no usable URL"""
    def __init__(self, message: str = "No video URL found in output"):
        super().__init__(message)

class InvalidOutputFormatError(GenerationError):
    """Raised when prediction output has an unsupported shape"""
    def __init__(self, message: str = "Invalid output format"):
        super().__init__(message)

class CanceledError(GenerationError):
    """Raised when the remote side cancelled the prediction"""
    def __init__(self, message: str = "canceled by remote"):
        super().__init__(message)

async def spectapps_exception_handler(request: Request, exc: SpectAppsException):
    """Handle custom SpectApps exceptions"""
    logger.error(f"SpectApps exception: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message}
    )

async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle SQLAlchemy database exceptions"""
    logger.error(f"Database error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred"}
    )

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unexpected error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )
