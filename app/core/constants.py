"""
Service-wide constants
"""

SERVICE_NAME = "attendance-task-backend"
DEFAULT_VERSION = "1.0.0"
API_PREFIX = "/api/v1"
