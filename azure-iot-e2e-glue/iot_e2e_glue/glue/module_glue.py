# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the glue between the test-runner contract and the asynchronous
IoTHubModuleClient of the Azure IoT Device SDK.
"""

import json
import logging
from azure.iot.device import Message, MethodResponse, X509
from azure.iot.device.aio import IoTHubModuleClient
from iot_e2e_glue import constant
from iot_e2e_glue.events import EventSource, wait_for_second_event
from iot_e2e_glue.exceptions import MethodPayloadMismatchError, UnsupportedTransportError
from iot_e2e_glue.named_object_cache import NamedObjectCache

logger = logging.getLogger(__name__)


class ModuleEvents(object):
    """Event sources fed by the handlers of one module client"""

    def __init__(self):
        self.connection_status = EventSource()
        self.input_messages = EventSource(keep_unclaimed=True)
        self.method_requests = EventSource(keep_unclaimed=True)
        # The cloud twin replays its current desired properties to each new subscriber
        self.desired_properties = EventSource(replay_latest=True)
        self.input_messages_enabled = False
        self.methods_enabled = False
        self.twin_enabled = False

    def clear_unclaimed(self):
        self.input_messages.clear_unclaimed()
        self.method_requests.clear_unclaimed()


def _client_kwargs(transport_type, ca_certificate=None):
    if transport_type not in constant.TRANSPORT_CHOICES:
        raise UnsupportedTransportError("Unsupported transport: {}".format(transport_type))
    kwargs = {}
    if transport_type == constant.TRANSPORT_MQTT_WS:
        kwargs["websockets"] = True
    if ca_certificate and ca_certificate.get("cert"):
        kwargs["server_verification_cert"] = ca_certificate["cert"]
    return kwargs


def _connection_status(client):
    if client.connected:
        return constant.CONNECTION_STATUS_CONNECTED
    else:
        return constant.CONNECTION_STATUS_DISCONNECTED


def _to_message(event_body):
    if isinstance(event_body, Message):
        return event_body
    elif isinstance(event_body, str):
        return Message(event_body)
    else:
        return Message(
            json.dumps(event_body), content_encoding="utf-8", content_type="application/json"
        )


def _message_body(message):
    if isinstance(message.data, bytes):
        return message.data.decode("utf-8")
    return message.data


class ModuleGlue(object):
    """Operations of the module domain of the test-runner contract.

    Every operation after a connect/create call takes the connection id that call returned.

    :param object_cache: The cache that module clients are stored in. A new cache is used if
        none is given.
    :type object_cache: :class:`iot_e2e_glue.named_object_cache.NamedObjectCache`
    """

    def __init__(self, object_cache=None):
        if object_cache is None:
            object_cache = NamedObjectCache()
        self._object_cache = object_cache
        self._event_cache = NamedObjectCache()

    def _add_client(self, client):
        connection_id = self._object_cache.add(constant.MODULE_CLIENT_PREFIX, client)
        events = ModuleEvents()
        self._event_cache.put(connection_id, events)

        def handle_connection_state_change():
            events.connection_status.emit(_connection_status(client))

        client.on_connection_state_change = handle_connection_state_change
        logger.info("Created module client {}".format(connection_id))
        return {"connectionId": connection_id}

    def _forget(self, connection_id):
        if connection_id in self._event_cache:
            self._event_cache.get(connection_id).clear_unclaimed()
        self._object_cache.remove(connection_id)
        self._event_cache.remove(connection_id)

    async def connect(self, transport_type, connection_string, ca_certificate=None):
        """Create a module client from a connection string and connect it

        :param str transport_type: Transport to use
        :param str connection_string: Module connection string
        :param dict ca_certificate: Dictionary with the PEM encoded trusted root in "cert"
            (optional)
        :returns: A dictionary containing the new "connectionId"
        """
        response = await self.create_from_connection_string(
            transport_type, connection_string, ca_certificate
        )
        await self.connect2(response["connectionId"])
        return response

    async def connect2(self, connection_id):
        client = self._object_cache.get(connection_id)
        logger.info("Connecting {}".format(connection_id))
        await client.connect()

    async def connect_from_environment(self, transport_type):
        """Create a module client using the IoT Edge environment and connect it"""
        response = await self.create_from_environment(transport_type)
        await self.connect2(response["connectionId"])
        return response

    async def create_from_connection_string(
        self, transport_type, connection_string, ca_certificate=None
    ):
        client = IoTHubModuleClient.create_from_connection_string(
            connection_string, **_client_kwargs(transport_type, ca_certificate)
        )
        return self._add_client(client)

    async def create_from_environment(self, transport_type):
        client = IoTHubModuleClient.create_from_edge_environment(**_client_kwargs(transport_type))
        return self._add_client(client)

    async def create_from_x509(self, transport_type, x509):
        """Create a module client from X509 credentials

        :param str transport_type: Transport to use
        :param dict x509: Dictionary with "hostname", "deviceId", "moduleId", "certFile",
            "keyFile" and (optionally) "passPhrase"
        """
        client = IoTHubModuleClient.create_from_x509_certificate(
            x509=X509(
                cert_file=x509["certFile"],
                key_file=x509["keyFile"],
                pass_phrase=x509.get("passPhrase"),
            ),
            hostname=x509["hostname"],
            device_id=x509["deviceId"],
            module_id=x509["moduleId"],
            **_client_kwargs(transport_type)
        )
        return self._add_client(client)

    async def disconnect(self, connection_id):
        """Disconnect the module client and release it. The connection id becomes invalid."""
        client = self._object_cache.get(connection_id)
        logger.info("Disconnecting {}".format(connection_id))
        await client.shutdown()
        self._forget(connection_id)

    async def disconnect2(self, connection_id):
        """Disconnect the module client, keeping it for a later connect2"""
        client = self._object_cache.get(connection_id)
        logger.info("Disconnecting {} (client kept)".format(connection_id))
        await client.disconnect()

    async def destroy(self, connection_id):
        client = self._object_cache.get(connection_id)
        logger.info("Destroying {}".format(connection_id))
        await client.shutdown()
        self._forget(connection_id)

    async def reconnect(self, connection_id, force_renew_password=False):
        client = self._object_cache.get(connection_id)
        if force_renew_password:
            # The client renews its own SAS tokens; a fresh connection is all that can be forced
            logger.info("Forced SAS renewal requested for {}".format(connection_id))
        logger.info("Reconnecting {}".format(connection_id))
        await client.disconnect()
        await client.connect()

    async def enable_input_messages(self, connection_id):
        client = self._object_cache.get(connection_id)
        events = self._event_cache.get(connection_id)
        logger.info("Enabling input messages on {}".format(connection_id))
        client.on_message_received = events.input_messages.emit
        events.input_messages_enabled = True

    async def enable_methods(self, connection_id):
        client = self._object_cache.get(connection_id)
        events = self._event_cache.get(connection_id)
        logger.info("Enabling methods on {}".format(connection_id))
        client.on_method_request_received = events.method_requests.emit
        events.methods_enabled = True

    async def enable_twin(self, connection_id):
        client = self._object_cache.get(connection_id)
        events = self._event_cache.get(connection_id)
        logger.info("Enabling twin on {}".format(connection_id))
        client.on_twin_desired_properties_patch_received = events.desired_properties.emit
        twin = await client.get_twin()
        events.desired_properties.set_latest(twin.get("desired", {}))
        events.twin_enabled = True

    async def get_connection_status(self, connection_id):
        client = self._object_cache.get(connection_id)
        return _connection_status(client)

    async def wait_for_connection_status_change(self, connection_id):
        events = self._event_cache.get(connection_id)
        status = await events.connection_status.wait_for_next()
        logger.info("Connection status of {} changed to {}".format(connection_id, status))
        return status

    async def send_event(self, connection_id, event_body):
        client = self._object_cache.get(connection_id)
        logger.debug("Sending event on {}".format(connection_id))
        await client.send_message(_to_message(event_body))

    async def send_output_event(self, connection_id, output_name, event_body):
        client = self._object_cache.get(connection_id)
        logger.debug("Sending event to output {} on {}".format(output_name, connection_id))
        await client.send_message_to_output(_to_message(event_body), output_name)

    async def wait_for_input_message(self, connection_id, input_name):
        """Wait for a message on a module input and return its body as a string"""
        events = self._event_cache.get(connection_id)
        if not events.input_messages_enabled:
            await self.enable_input_messages(connection_id)
        message = await events.input_messages.wait_for_next(
            lambda m: m.input_name == input_name
        )
        logger.debug("Received message on input {} of {}".format(input_name, connection_id))
        return _message_body(message)

    async def get_twin(self, connection_id):
        client = self._object_cache.get(connection_id)
        return await client.get_twin()

    async def patch_twin(self, connection_id, props):
        """Update the reported properties of the module twin

        :param dict props: The reported properties patch. A patch wrapped as
            {"reported": {...}}, with no other keys, is unwrapped first.
        """
        client = self._object_cache.get(connection_id)
        if isinstance(props, dict) and list(props) == ["reported"]:
            props = props["reported"]
        await client.patch_twin_reported_properties(props)

    async def wait_for_desired_properties_patch(self, connection_id):
        """Wait for the next desired properties patch.

        The current desired properties are delivered first to every new subscriber; only the
        change that follows them is returned.
        """
        events = self._event_cache.get(connection_id)
        if not events.twin_enabled:
            await self.enable_twin(connection_id)
        patch = await wait_for_second_event(events.desired_properties)
        logger.debug("Received desired properties patch on {}".format(connection_id))
        return patch

    async def invoke_device_method(self, connection_id, device_id, method_invoke_parameters):
        client = self._object_cache.get(connection_id)
        return await client.invoke_method(method_invoke_parameters, device_id)

    async def invoke_module_method(
        self, connection_id, device_id, module_id, method_invoke_parameters
    ):
        client = self._object_cache.get(connection_id)
        return await client.invoke_method(method_invoke_parameters, device_id, module_id=module_id)

    async def roundtrip_method_call(self, connection_id, method_name, request_and_response):
        """Wait for a call to the given method, verify its payload and send the given response.

        :param str method_name: Name of the method to handle
        :param dict request_and_response: Dictionary with the expected
            "requestPayload": {"payload": ...}, and the "responsePayload" and "statusCode" to
            respond with

        :raises: :class:`iot_e2e_glue.exceptions.MethodPayloadMismatchError` if the request
            payload is not the expected one. The method is answered with status 500 first.
        """
        client = self._object_cache.get(connection_id)
        events = self._event_cache.get(connection_id)
        if not events.methods_enabled:
            await self.enable_methods(connection_id)

        request = await events.method_requests.wait_for_next(lambda r: r.name == method_name)
        expected_payload = request_and_response.get("requestPayload", {}).get("payload")

        if request.payload != expected_payload:
            logger.error(
                "Method {} on {} received unexpected payload {}".format(
                    method_name, connection_id, request.payload
                )
            )
            response = MethodResponse.create_from_method_request(
                request, constant.METHOD_STATUS_PAYLOAD_MISMATCH, None
            )
            await client.send_method_response(response)
            raise MethodPayloadMismatchError(
                "Expected payload {} for method {}, got {}".format(
                    expected_payload, method_name, request.payload
                )
            )

        response = MethodResponse.create_from_method_request(
            request,
            request_and_response["statusCode"],
            request_and_response.get("responsePayload"),
        )
        await client.send_method_response(response)
