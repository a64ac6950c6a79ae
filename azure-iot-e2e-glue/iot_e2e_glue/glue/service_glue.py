# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the glue between the test-runner contract and the service-side
operations of the Azure IoT Hub Service SDK (direct methods and cloud-to-device messages).

The Python Service SDK carries these operations on IoTHubRegistryManager.
"""

import json
import logging
from azure.iot.hub import IoTHubRegistryManager
from azure.iot.hub.models import CloudToDeviceMethod
from iot_e2e_glue import constant
from iot_e2e_glue.async_adapter import emulate_async
from iot_e2e_glue.named_object_cache import NamedObjectCache

logger = logging.getLogger(__name__)


def _to_method_request(method_invoke_parameters):
    return CloudToDeviceMethod(
        method_name=method_invoke_parameters["methodName"],
        payload=method_invoke_parameters.get("payload"),
        response_timeout_in_seconds=method_invoke_parameters.get("responseTimeoutInSeconds"),
        connect_timeout_in_seconds=method_invoke_parameters.get("connectTimeoutInSeconds"),
    )


class ServiceGlue(object):
    """Operations of the service domain of the test-runner contract"""

    def __init__(self, object_cache=None):
        if object_cache is None:
            object_cache = NamedObjectCache()
        self._object_cache = object_cache

    async def connect(self, connection_string):
        create_async = emulate_async(IoTHubRegistryManager.from_connection_string)
        service_client = await create_async(connection_string)
        connection_id = self._object_cache.add(constant.SERVICE_CLIENT_PREFIX, service_client)
        logger.info("Created service client {}".format(connection_id))
        return {"connectionId": connection_id}

    async def disconnect(self, connection_id):
        self._object_cache.get(connection_id)
        logger.info("Releasing service client {}".format(connection_id))
        self._object_cache.remove(connection_id)

    async def invoke_device_method(self, connection_id, device_id, method_invoke_parameters):
        """Call a direct method on a device

        :param dict method_invoke_parameters: Dictionary with "methodName", "payload",
            "responseTimeoutInSeconds" and "connectTimeoutInSeconds"
        :returns: The method result as a dictionary with "status" and "payload"
        """
        service_client = self._object_cache.get(connection_id)
        result = await emulate_async(service_client.invoke_device_method)(
            device_id, _to_method_request(method_invoke_parameters)
        )
        return result.serialize()

    async def invoke_module_method(
        self, connection_id, device_id, module_id, method_invoke_parameters
    ):
        service_client = self._object_cache.get(connection_id)
        result = await emulate_async(service_client.invoke_device_module_method)(
            device_id, module_id, _to_method_request(method_invoke_parameters)
        )
        return result.serialize()

    async def send_c2d(self, connection_id, device_id, event_body):
        service_client = self._object_cache.get(connection_id)
        if not isinstance(event_body, str):
            event_body = json.dumps(event_body)
        logger.debug("Sending C2D message to {}".format(device_id))
        await emulate_async(service_client.send_c2d_message)(device_id, event_body)
