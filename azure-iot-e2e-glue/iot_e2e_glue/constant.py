# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the iot_e2e_glue package
"""

VERSION = "0.1.0"
USER_AGENT = "azure-iot-e2e-glue-py/" + VERSION
PROVISIONING_API_VERSION = "2019-03-31"

TRANSPORT_MQTT = "mqtt"
TRANSPORT_MQTT_WS = "mqttws"
TRANSPORT_CHOICES = [TRANSPORT_MQTT, TRANSPORT_MQTT_WS]

# Prefixes used when minting connection ids
MODULE_CLIENT_PREFIX = "moduleClient"
REGISTRY_PREFIX = "registry"
SERVICE_CLIENT_PREFIX = "serviceClient"

CONNECTION_STATUS_CONNECTED = "connected"
CONNECTION_STATUS_DISCONNECTED = "disconnected"

# Status sent back to the service when a round-trip method call gets an unexpected payload
METHOD_STATUS_PAYLOAD_MISMATCH = 500
