# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Azure IoT End-to-End Glue

This library adapts the Azure IoT Device and Service SDK clients to the language-agnostic
test-runner contract used by the cross-SDK end-to-end tests.
"""

from .constant import VERSION as __version__  # noqa: F401
from .context import GlueContext
from .events import EventSource, SecondEventWaiter, wait_for_second_event
from .exceptions import (
    GlueError,
    ObjectNotFoundError,
    UnsupportedTransportError,
    MethodPayloadMismatchError,
    ProvisioningServiceError,
    UnknownOperationError,
)
from .glue import ModuleGlue, RegistryGlue, ServiceGlue
from .named_object_cache import NamedObjectCache
from .provisioning import ProvisioningServiceClient

__all__ = [
    "GlueContext",
    "EventSource",
    "SecondEventWaiter",
    "wait_for_second_event",
    "GlueError",
    "ObjectNotFoundError",
    "UnsupportedTransportError",
    "MethodPayloadMismatchError",
    "ProvisioningServiceError",
    "UnknownOperationError",
    "ModuleGlue",
    "RegistryGlue",
    "ServiceGlue",
    "NamedObjectCache",
    "ProvisioningServiceClient",
]
