# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains a client for enrollment operations on the Device Provisioning Service.

Enrollments are passed and returned as dictionaries in the wire format used by the service
REST API (camelCase keys).
"""

import logging
import urllib.parse
import uuid
import requests
from azure.iot.hub.auth import ConnectionStringAuthentication
from azure.iot.hub.connection_string import HOST_NAME
from iot_e2e_glue import constant
from iot_e2e_glue.exceptions import ProvisioningServiceError

logger = logging.getLogger(__name__)

ENROLLMENTS_URL = "/enrollments/{id}"
ENROLLMENT_GROUPS_URL = "/enrollmentGroups/{id}"
ATTESTATION_MECHANISM_SUFFIX = "/attestationmechanism"

INDIVIDUAL_ENROLLMENT_ID = "registrationId"
ENROLLMENT_GROUP_ID = "enrollmentGroupId"


class ProvisioningServiceClient(object):
    """
    API for conducting enrollment operations on a Device Provisioning Service

    :param str connection_string: The connection string for the Device Provisioning Service
    :param session: A requests Session to send requests with (optional)
    :type session: :class:`requests.Session`
    :raises: ValueError if connection string is invalid
    """

    def __init__(self, connection_string, session=None):
        self._auth = ConnectionStringAuthentication(connection_string)
        self.host_name = self._auth[HOST_NAME]
        self.base_url = "https://" + self.host_name
        self._session = session or requests.Session()

    @classmethod
    def create_from_connection_string(cls, connection_string, session=None):
        """
        Create a Provisioning Service Client from a connection string

        :param str connection_string: The connection string for the Device Provisioning Service
        :raises: ValueError if connection string is invalid
        """
        return cls(connection_string, session=session)

    def close(self):
        self._session.close()

    def _headers(self, etag=None):
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json; charset=utf-8",
            "Request-Id": str(uuid.uuid4()),
            "User-Agent": constant.USER_AGENT,
        }
        if etag is not None:
            headers["If-Match"] = etag
        return headers

    def _send(self, method, path, expected_status, body=None, etag=None):
        url = self.base_url + path
        logger.debug("{} {}".format(method, url))
        # Each request gets a freshly signed SAS token on the session
        session = self._auth.signed_session(self._session)
        response = session.request(
            method,
            url,
            params={"api-version": constant.PROVISIONING_API_VERSION},
            headers=self._headers(etag),
            json=body,
        )
        if response.status_code != expected_status:
            raise ProvisioningServiceError(
                "Service Error {} - {}".format(response.status_code, _error_message(response)),
                status_code=response.status_code,
            )
        if response.content:
            return response.json()
        return None

    def _create_or_update(self, url_format, id_property, enrollment):
        path = url_format.format(id=_quote(enrollment[id_property]))
        return self._send("PUT", path, 200, body=enrollment, etag=enrollment.get("etag"))

    def _delete(self, url_format, id_property, id_or_enrollment, etag):
        # An enrollment record can be passed in place of its id. Its etag is then used
        # unless one is given explicitly.
        if isinstance(id_or_enrollment, dict):
            enrollment_id = id_or_enrollment[id_property]
            if etag is None:
                etag = id_or_enrollment.get("etag")
        else:
            enrollment_id = id_or_enrollment
        path = url_format.format(id=_quote(enrollment_id))
        self._send("DELETE", path, 204, etag=etag)

    def create_or_update_individual_enrollment(self, enrollment):
        """Create or update an Individual Enrollment.

        :param dict enrollment: The enrollment record. Its etag (if present) is sent as If-Match
        :returns: The enrollment record as stored by the service
        :raises: :class:`iot_e2e_glue.exceptions.ProvisioningServiceError`
        """
        return self._create_or_update(ENROLLMENTS_URL, INDIVIDUAL_ENROLLMENT_ID, enrollment)

    def get_individual_enrollment(self, registration_id):
        return self._send("GET", ENROLLMENTS_URL.format(id=_quote(registration_id)), 200)

    def delete_individual_enrollment(self, registration_id_or_enrollment, etag=None):
        """Delete an Individual Enrollment.

        :param registration_id_or_enrollment: The registration id, or the enrollment record itself
        :param str etag: The etag of the enrollment to delete (optional)
        :raises: :class:`iot_e2e_glue.exceptions.ProvisioningServiceError`
        """
        self._delete(ENROLLMENTS_URL, INDIVIDUAL_ENROLLMENT_ID, registration_id_or_enrollment, etag)

    def get_individual_enrollment_attestation_mechanism(self, registration_id):
        path = ENROLLMENTS_URL.format(id=_quote(registration_id)) + ATTESTATION_MECHANISM_SUFFIX
        return self._send("POST", path, 200)

    def create_or_update_enrollment_group(self, enrollment_group):
        return self._create_or_update(ENROLLMENT_GROUPS_URL, ENROLLMENT_GROUP_ID, enrollment_group)

    def get_enrollment_group(self, group_id):
        return self._send("GET", ENROLLMENT_GROUPS_URL.format(id=_quote(group_id)), 200)

    def delete_enrollment_group(self, group_id_or_enrollment_group, etag=None):
        self._delete(ENROLLMENT_GROUPS_URL, ENROLLMENT_GROUP_ID, group_id_or_enrollment_group, etag)

    def get_enrollment_group_attestation_mechanism(self, group_id):
        path = ENROLLMENT_GROUPS_URL.format(id=_quote(group_id)) + ATTESTATION_MECHANISM_SUFFIX
        return self._send("POST", path, 200)


def _quote(value):
    return urllib.parse.quote(value, safe="")


def _error_message(response):
    try:
        return response.json().get("message", response.text)
    except ValueError:
        return response.text
