# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the context object that owns the connection cache and the glues
sharing it.
"""

import logging
import re
from .exceptions import UnknownOperationError
from .glue import ModuleGlue, RegistryGlue, ServiceGlue
from .named_object_cache import NamedObjectCache

logger = logging.getLogger(__name__)

_camel_case_boundary = re.compile(r"(?<!^)(?=[A-Z])")


def operation_to_method_name(action):
    """Convert a contract action name (e.g. "WaitForInputMessage") to a glue method name
    (e.g. "wait_for_input_message")
    """
    return _camel_case_boundary.sub("_", action).lower()


class GlueContext(object):
    """Holds the connection cache and one glue per domain.

    Pass one of these to whatever serves the test-runner contract instead of keeping
    connections in module-level state.

    :param object_cache: The cache shared by all glues. A new cache is used if none is given.
    """

    def __init__(self, object_cache=None):
        if object_cache is None:
            object_cache = NamedObjectCache()
        self.object_cache = object_cache
        self.module = ModuleGlue(object_cache)
        self.registry = RegistryGlue(object_cache)
        self.service = ServiceGlue(object_cache)
        self._domains = {"module": self.module, "registry": self.registry, "service": self.service}

    def get_operation(self, operation_name):
        """Return the coroutine function implementing a contract operation

        :param str operation_name: Contract operation name, e.g. "module_SendEvent"
        :raises: :class:`iot_e2e_glue.exceptions.UnknownOperationError` if no glue implements it
        """
        domain, _, action = operation_name.partition("_")
        glue = self._domains.get(domain)
        method_name = operation_to_method_name(action)
        if glue is None or not action or method_name.startswith("_"):
            raise UnknownOperationError("Unknown operation: {}".format(operation_name))
        try:
            return getattr(glue, method_name)
        except AttributeError:
            raise UnknownOperationError("Unknown operation: {}".format(operation_name)) from None

    async def call(self, operation_name, *args, **kwargs):
        """Run a contract operation, e.g. ``await context.call("module_GetTwin", connection_id)``"""
        operation = self.get_operation(operation_name)
        logger.debug("Calling {}".format(operation_name))
        return await operation(*args, **kwargs)
