# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Custom exceptions for graph schema testing."""

from typing import Optional


UNEXPECTED_ERROR_CODE = "UNEXPECTED_ERROR"
UNEXPECTED_ERROR_REASON = (
    "Unexpected error occurred executing integration! Please contact us in "
    "Slack or at https://support.jupiterone.io if the problem continues to occur."
)
PROVIDER_AUTH_ERROR_DESCRIPTION = (
    " Failed to access provider resource."
    " This integration is likely misconfigured or has insufficient permissions"
    " required to access the resource. Please ensure your integration is"
    " configured correctly."
)


class GraphSchemaError(Exception):
    """Base exception for graph schema testing errors."""
    pass


class SchemaRegistryError(GraphSchemaError):
    """Exception raised when the schema registry cannot serve a schema."""
    pass


class UnknownClassError(SchemaRegistryError):
    """Exception raised when a taxonomy class is not known to the registry."""

    def __init__(self, class_name: str, message: Optional[str] = None):
        self.class_name = class_name
        super().__init__(message or f"Unknown data model class: '{class_name}'")


class SchemaResolutionError(GraphSchemaError):
    """Exception raised when a class list cannot be resolved into one schema."""

    def __init__(self, class_name: str, message: str, assertion_name: Optional[str] = None):
        self.class_name = class_name
        self.assertion_name = assertion_name
        super().__init__(message)


class FormatVersionError(GraphSchemaError):
    """Exception raised when a data model version string is invalid or incompatible."""
    pass


class IntegrationError(GraphSchemaError):
    """Error with a machine readable code, surfaced to integration users."""

    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(message)


class IntegrationValidationError(IntegrationError):
    """Exception raised when an integration configuration is invalid."""

    def __init__(self, message: str):
        super().__init__("CONFIG_VALIDATION_ERROR", message)


class IntegrationProviderAuthenticationError(IntegrationError):
    """Exception raised when a provider rejects the configured credentials."""

    def __init__(self, endpoint: str, status: int, status_text: str):
        self.endpoint = endpoint
        self.status = status
        self.status_text = status_text
        super().__init__(
            "PROVIDER_AUTHENTICATION_ERROR",
            f"Provider authentication failed at {endpoint}: {status} {status_text}",
        )


class IntegrationProviderAuthorizationError(IntegrationError):
    """Exception raised when the configured credentials lack a permission."""

    def __init__(self, endpoint: str, status: int, status_text: str):
        self.endpoint = endpoint
        self.status = status
        self.status_text = status_text
        super().__init__(
            "PROVIDER_AUTHORIZATION_ERROR",
            f"Provider authorization failed at {endpoint}: {status} {status_text}",
        )
