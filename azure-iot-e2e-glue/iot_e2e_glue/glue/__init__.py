# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Per-domain glue between the test-runner contract and the Azure IoT SDK clients"""

from .module_glue import ModuleGlue
from .registry_glue import RegistryGlue
from .service_glue import ServiceGlue

__all__ = ["ModuleGlue", "RegistryGlue", "ServiceGlue"]
