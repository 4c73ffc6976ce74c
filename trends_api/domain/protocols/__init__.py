"""Domain protocols (ports)."""

from trends_api.domain.protocols.admission_protocol import AdmissionProtocol
from trends_api.domain.protocols.logger_protocol import LoggerProtocol

__all__ = ["AdmissionProtocol", "LoggerProtocol"]
