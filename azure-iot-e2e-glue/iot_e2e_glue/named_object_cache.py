# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the cache used to hand live SDK objects back to the caller by name"""

import logging
from typing import Any, Dict, List
from .exceptions import ObjectNotFoundError

logger = logging.getLogger(__name__)


class NamedObjectCache:
    """Maps opaque connection ids to live objects.

    Entries live until they are explicitly removed. There is no eviction and no locking: the
    cache is only touched from the event loop thread, between suspension points.
    """

    def __init__(self) -> None:
        self._objects: Dict[str, Any] = {}
        self._next_index = 1

    def __contains__(self, object_id: str) -> bool:
        return object_id in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def ids(self) -> List[str]:
        return list(self._objects.keys())

    def put(self, object_id: str, obj: Any) -> None:
        """Store an object under the given id, replacing anything already stored there

        :param str object_id: The id to store the object under
        :param obj: The object to store
        """
        if object_id in self._objects:
            logger.debug("Replacing cached object {}".format(object_id))
        self._objects[object_id] = obj

    def add(self, prefix: str, obj: Any) -> str:
        """Store an object under a newly minted id of the form "<prefix>_<n>"

        :param str prefix: Prefix for the new id
        :param obj: The object to store
        :returns: The new id
        """
        object_id = "{}_{}".format(prefix, self._next_index)
        while object_id in self._objects:
            self._next_index += 1
            object_id = "{}_{}".format(prefix, self._next_index)
        self._next_index += 1
        self._objects[object_id] = obj
        logger.debug("Added {} to object cache".format(object_id))
        return object_id

    def get(self, object_id: str) -> Any:
        """Return the object stored under the given id

        :raises: :class:`iot_e2e_glue.exceptions.ObjectNotFoundError` if nothing is stored
            under the id
        """
        try:
            return self._objects[object_id]
        except KeyError:
            raise ObjectNotFoundError("No object cached for id {}".format(object_id)) from None

    def remove(self, object_id: str) -> None:
        """Forget the object stored under the given id. Unknown ids are ignored."""
        if self._objects.pop(object_id, None) is not None:
            logger.debug("Removed {} from object cache".format(object_id))
