# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define exceptions raised by the glue layer itself.

Errors raised by the underlying SDK clients are never wrapped; they propagate to the caller as-is.
"""


class GlueError(Exception):
    """Represents a failure originating in the glue layer"""

    pass


class ObjectNotFoundError(GlueError, LookupError):
    """Represents a lookup of a connection id that is not in the object cache"""

    pass


class UnsupportedTransportError(GlueError, ValueError):
    """Represents a request for a transport the SDK client cannot use"""

    pass


class MethodPayloadMismatchError(GlueError):
    """Represents a method request whose payload differs from the expected one"""

    pass


class ProvisioningServiceError(GlueError):
    """Represents a failure reported by the Device Provisioning Service

    :param str message: Error message
    :param int status_code: HTTP status code of the failed response (optional)
    """

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class UnknownOperationError(GlueError, LookupError):
    """Represents a contract operation name that no glue implements"""

    pass
