# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Client and record helpers for the Device Provisioning Service enrollment API"""

from .service_client import ProvisioningServiceClient
from . import models

__all__ = ["ProvisioningServiceClient", "models"]
