# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the glue between the test-runner contract and the twin operations
of the IoTHubRegistryManager in the Azure IoT Hub Service SDK.
"""

import logging
from azure.iot.hub import IoTHubRegistryManager
from azure.iot.hub.models import Twin
from iot_e2e_glue import constant
from iot_e2e_glue.async_adapter import emulate_async
from iot_e2e_glue.named_object_cache import NamedObjectCache

logger = logging.getLogger(__name__)


class RegistryGlue(object):
    """Operations of the registry domain of the test-runner contract.

    Twins are returned and accepted as dictionaries in the IoT Hub REST wire format.
    """

    def __init__(self, object_cache=None):
        if object_cache is None:
            object_cache = NamedObjectCache()
        self._object_cache = object_cache

    async def connect(self, connection_string):
        """Create a registry manager. The SDK keeps the connection string for later calls.

        :returns: A dictionary containing the new "connectionId"
        """
        create_async = emulate_async(IoTHubRegistryManager.from_connection_string)
        registry_manager = await create_async(connection_string)
        connection_id = self._object_cache.add(constant.REGISTRY_PREFIX, registry_manager)
        logger.info("Created registry manager {}".format(connection_id))
        return {"connectionId": connection_id}

    async def disconnect(self, connection_id):
        # Lookup first, so that an unknown id is reported
        self._object_cache.get(connection_id)
        logger.info("Releasing registry manager {}".format(connection_id))
        self._object_cache.remove(connection_id)

    async def get_device_twin(self, connection_id, device_id):
        registry_manager = self._object_cache.get(connection_id)
        twin = await emulate_async(registry_manager.get_twin)(device_id)
        return twin.serialize()

    async def get_module_twin(self, connection_id, device_id, module_id):
        registry_manager = self._object_cache.get(connection_id)
        twin = await emulate_async(registry_manager.get_module_twin)(device_id, module_id)
        return twin.serialize()

    async def patch_device_twin(self, connection_id, device_id, props):
        """Update tags and desired properties of a device twin

        :param dict props: Twin patch, e.g. {"properties": {"desired": {...}}}
        """
        registry_manager = self._object_cache.get(connection_id)
        logger.debug("Patching twin of device {}".format(device_id))
        await emulate_async(registry_manager.update_twin)(device_id, Twin.from_dict(props), "*")

    async def patch_module_twin(self, connection_id, device_id, module_id, props):
        registry_manager = self._object_cache.get(connection_id)
        logger.debug("Patching twin of module {}/{}".format(device_id, module_id))
        await emulate_async(registry_manager.update_module_twin)(
            device_id, module_id, Twin.from_dict(props), "*"
        )
