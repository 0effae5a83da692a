"""
Custom exceptions untuk API
"""
from fastapi import HTTPException


class ServicesNotInitialized(HTTPException):
    def __init__(self):
        super().__init__(status_code=503, detail="Search services not initialized")


class ApplicationStartupIncomplete(HTTPException):
    def __init__(self):
        super().__init__(status_code=503, detail="Application is still starting up")
