"""HTTP middleware."""

from trends_api.presentation.middleware.admission_middleware import AdmissionMiddleware

__all__ = ["AdmissionMiddleware"]
