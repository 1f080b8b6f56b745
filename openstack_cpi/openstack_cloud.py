##############################################################################
# Copyright 2016 IBM Corp.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
##############################################################################

import math
import logging
import yaml
from bitmath import MiB, GiB, TiB
from pyrsistent import PClass, field
from zope.interface import Interface, implementer
from twisted.python.filepath import FilePath

from openstack_cpi.lib import messages
from openstack_cpi.lib.abstract_client import (
    ConnectionInfo,
    FactoryBackendAPIClient,
)
from openstack_cpi.lib.exceptions import CloudError
from openstack_cpi.lib.utils import (
    logme,
    config_logger,
    generate_unique_name,
    wait_resource,
)
from openstack_cpi.lib.constants import (
    CONF_PARAM_API_KEY,
    CONF_PARAM_AUTH_URL,
    CONF_PARAM_CLIENT_TYPE,
    CONF_PARAM_DEBUG,
    CONF_PARAM_DEBUG_OPTIONS,
    CONF_PARAM_ENDPOINT_TYPE,
    CONF_PARAM_IGNORE_SERVER_AZ,
    CONF_PARAM_POLL_INTERVAL,
    CONF_PARAM_REGION,
    CONF_PARAM_STATE_TIMEOUT,
    CONF_PARAM_TENANT,
    CONF_PARAM_USERNAME,
    CONF_PARAM_VERIFY_SSL,
    CONF_SECTION_OPENSTACK,
    DEFAULT_CLIENT_TYPE,
    DEFAULT_DEBUG_LEVEL,
    DEFAULT_IGNORE_SERVER_AZ,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_STATE_TIMEOUT,
    DEFAULT_VERIFY_SSL,
    MANDATORY_CONFIGURATIONS_IN_YML_FILE,
    VOLUME_NAME_PREFIX,
    VOLUME_STATE_AVAILABLE,
    VOLUME_TYPE_PROPERTY,
)

LOG = config_logger(logging.getLogger(__name__))
PREFIX = 'CPI'  # log prefix
MIN_DISK_SIZE = GiB(1)
MAX_DISK_SIZE = TiB(1)

_OPTIONAL_STR = (str, type(None))
_NUMBER = (int, float)


def get_openstack_cloud_by_conf(conf_dict, client=None):
    """
    Instantiate OpenStackCloud based on a given configuration dict.
    :param conf_dict: dict with all the cloud configuration parameters
    :param client: backend client to use instead of building one from
                   the configuration
    :return: OpenStackCloud
    """
    verify_mandatory_configurations(conf_dict)
    connection_info = get_connection_info_from_conf(conf_dict)
    options = get_cloud_options_from_conf(conf_dict)
    LOG.setLevel(connection_info.debug_level)

    # Get backend client object
    client_type = conf_dict.get(CONF_PARAM_CLIENT_TYPE, DEFAULT_CLIENT_TYPE)
    if client is None:
        client = FactoryBackendAPIClient.factory(connection_info, client_type)

    LOG.info(messages.DRIVER_INITIALIZATION.format(
        client_type=client_type,
        auth_url=connection_info.auth_url,
        username=connection_info.credential['username'],
    ))
    return OpenStackCloud(client, options)


def get_openstack_cloud_by_conf_file(conf_file_path, client=None):
    """
    Instantiate OpenStackCloud based on the openstack section of a YML file.
    :param conf_file_path: path to the YML file
    :param client: see get_openstack_cloud_by_conf
    :return: OpenStackCloud
    """
    config = yaml.safe_load(FilePath(conf_file_path).getContent()) or {}
    if CONF_SECTION_OPENSTACK not in config:
        raise CloudConfigMissingValue(CONF_SECTION_OPENSTACK)
    return get_openstack_cloud_by_conf(config[CONF_SECTION_OPENSTACK], client)


def verify_mandatory_configurations(conf_dict):
    """
    :param conf_dict:
    :raises CloudConfigMissingValue: for the first missing parameter
    :return: None
    """
    missing = sorted(MANDATORY_CONFIGURATIONS_IN_YML_FILE - set(conf_dict))
    if missing:
        raise CloudConfigMissingValue(missing[0])


def get_connection_info_from_conf(conf_dict):
    """
    Build a ConnectionInfo object from the configuration dict.
    Define defaults if needed (e.g verify_ssl and debug).
    :param conf_dict:
    :return: ConnectionInfo
    """
    # Handle optional configurations
    debug = conf_dict.get(CONF_PARAM_DEBUG, DEFAULT_DEBUG_LEVEL)
    if debug not in CONF_PARAM_DEBUG_OPTIONS:
        raise CloudConfigWrongValue(CONF_PARAM_DEBUG, CONF_PARAM_DEBUG_OPTIONS)

    verify_ssl = conf_dict.get(CONF_PARAM_VERIFY_SSL, DEFAULT_VERIFY_SSL)
    if not isinstance(verify_ssl, bool):
        raise CloudConfigWrongValue(CONF_PARAM_VERIFY_SSL, bool)

    # endpoint_type default set by the client object
    return ConnectionInfo(
        conf_dict[CONF_PARAM_AUTH_URL],
        conf_dict[CONF_PARAM_USERNAME],
        conf_dict[CONF_PARAM_API_KEY],
        conf_dict[CONF_PARAM_TENANT],
        region=conf_dict.get(CONF_PARAM_REGION),
        endpoint_type=conf_dict.get(CONF_PARAM_ENDPOINT_TYPE),
        verify_ssl=verify_ssl,
        debug_level=debug,
    )


def _positive_number(conf_dict, param, default):
    value = conf_dict.get(param, default)
    if isinstance(value, bool) or not isinstance(value, _NUMBER) or \
            value <= 0:
        raise CloudConfigWrongValue(param, 'positive number')
    return value


def get_cloud_options_from_conf(conf_dict):
    """
    Build the CloudOptions read by the cloud operations.
    :param conf_dict:
    :return: CloudOptions
    """
    ignore_server_az = conf_dict.get(CONF_PARAM_IGNORE_SERVER_AZ,
                                     DEFAULT_IGNORE_SERVER_AZ)
    if not isinstance(ignore_server_az, bool):
        raise CloudConfigWrongValue(CONF_PARAM_IGNORE_SERVER_AZ, bool)

    return CloudOptions(
        ignore_server_availability_zone=ignore_server_az,
        state_timeout=_positive_number(
            conf_dict, CONF_PARAM_STATE_TIMEOUT, DEFAULT_STATE_TIMEOUT),
        wait_resource_poll_interval=_positive_number(
            conf_dict, CONF_PARAM_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
    )


def disk_size_in_gib(size_mib):
    """
    :param size_mib: int, the requested size in MiB
    :raises TypeError: if size_mib is not an integer
    :raises CloudError: if the size is out of [1 GiB, 1 TiB]
    :return: int, the size in GiB rounded up
    e.g : 2049 -> 3
    """
    if isinstance(size_mib, bool) or not isinstance(size_mib, int):
        raise TypeError(messages.DISK_SIZE_NOT_INTEGER)

    size = MiB(size_mib)
    if size < MIN_DISK_SIZE:
        raise CloudError(messages.MIN_DISK_SIZE_ERROR)
    if size > MAX_DISK_SIZE:
        raise CloudError(messages.MAX_DISK_SIZE_ERROR)

    return int(math.ceil(size.to_GiB().value))


def get_volume_type(cloud_properties):
    """
    :param cloud_properties: dict or None
    :return: the volume type as given, None if not requested
    """
    return (cloud_properties or {}).get(VOLUME_TYPE_PROPERTY)


class CloudConfigWrongValue(Exception):

    def __init__(self, parameter_name, expected_value):
        Exception.__init__(
            self,
            messages.WRONG_VALUE_FOR_YML_PARAMETER.format(parameter_name,
                                                          expected_value),
        )


class CloudConfigMissingValue(Exception):

    def __init__(self, parameter_name):
        Exception.__init__(
            self,
            messages.MISSING_YML_PARAMETER.format(parameter_name,
                                                  messages.OPENSTACK_STRING),
        )
        self.parameter_name = parameter_name


class CloudOptions(PClass):
    """
    Cloud wide configuration, read by every operation.

    :ivar bool ignore_server_availability_zone: If True, new disks are not
        placed in the availability zone of the server they are created for.
    :ivar state_timeout: Seconds to wait for a resource to reach a state.
    :ivar wait_resource_poll_interval: Seconds between two status checks.
    """
    ignore_server_availability_zone = field(
        type=bool, initial=DEFAULT_IGNORE_SERVER_AZ, mandatory=True)
    state_timeout = field(
        type=_NUMBER, initial=DEFAULT_STATE_TIMEOUT, mandatory=True)
    wait_resource_poll_interval = field(
        type=_NUMBER, initial=DEFAULT_POLL_INTERVAL, mandatory=True)


class DiskSpec(PClass):
    """
    A volume to create.

    :ivar unicode name: The display name of the volume.
    :ivar int size: The size in GiB.
    :ivar description: ``None`` to leave the description out.
    :ivar volume_type: The volume type or ``None`` for the cloud default.
    :ivar image_ref: The image to boot from, ``None`` for a data disk.
    :ivar availability_zone: ``None`` to let the cloud choose.
    """
    name = field(type=str, mandatory=True)
    size = field(type=int, mandatory=True)
    description = field(type=_OPTIONAL_STR, initial=None, mandatory=True)
    # Passed to the backend as given
    volume_type = field(initial=None, mandatory=True)
    image_ref = field(initial=None, mandatory=True)
    availability_zone = field(initial=None, mandatory=True)

    def to_params(self):
        """
        :return: dict of the volume create parameters, unset fields omitted
        """
        params = dict(
            display_name=self.name,
            display_description=self.description,
            size=self.size,
            volume_type=self.volume_type,
            imageRef=self.image_ref,
            availability_zone=self.availability_zone,
        )
        return {key: value for key, value in params.items()
                if value is not None}


class ICloud(Interface):
    """
    Disk provisioning operations of an OpenStack Cloud Provider Interface.
    """

    def create_disk(size_mib, cloud_properties, server_id=None):
        """
        Create a detachable data disk.

        :param int size_mib: The size of the disk in MiB.
        :param dict cloud_properties: May hold the volume ``type``.
        :param server_id: If given, the disk is created in the availability
            zone of this server (unless configured otherwise).
        :returns: The ID of the new volume.
        """

    def create_boot_disk(size_mib, image_id, availability_zone=None,
                         cloud_properties=None):
        """
        Create a bootable disk from an image.

        :param int size_mib: The size of the disk in MiB.
        :param image_id: The image to create the disk from.
        :param availability_zone: Used as given, if not ``None``.
        :param dict cloud_properties: May hold the volume ``type``.
        :returns: The ID of the new volume.
        """


@implementer(ICloud)
class OpenStackCloud(object):
    """
    A ``ICloud`` for OpenStack Cinder volumes.
    """

    def __init__(self, client, options=None, unique_name_generator=None,
                 resource_waiter=None):
        """
        Initialize new instance of the OpenStack CPI.

        :param client: OpenStackAbsClient
        :param CloudOptions options: If None, defaults are used.
        :param unique_name_generator: callable() returning a unique string
        :param resource_waiter: callable(resource, target_state) that
            blocks until the resource reaches the state
        """
        self._client = client
        self._options = options if options is not None else CloudOptions()
        self._generate_unique_name = \
            unique_name_generator or generate_unique_name
        self._wait_resource = resource_waiter or self._wait_volume

    def _wait_volume(self, volume, target_state):
        return wait_resource(
            volume,
            target_state,
            refresh=self._client.get_volume,
            timeout=self._options.state_timeout,
            poll_interval=self._options.wait_resource_poll_interval,
        )

    def _volume_name(self):
        return '{}{}'.format(VOLUME_NAME_PREFIX, self._generate_unique_name())

    def _server_availability_zone(self, server_id):
        """
        :param server_id: None if the disk is not created for a server
        :return: The availability zone for a new data disk, or None
        """
        if server_id is None:
            return None
        if self._options.ignore_server_availability_zone:
            LOG.debug(messages.DRIVER_OPERATION_SERVER_AZ_IGNORED.format(
                server_id=server_id))
            return None

        server = self._client.get_server(server_id)
        if server is None:
            LOG.warning(messages.DRIVER_OPERATION_SERVER_NOT_FOUND.format(
                server_id=server_id))
            return None

        LOG.debug(messages.DRIVER_OPERATION_SERVER_AZ.format(
            server_id=server_id, zone=server.availability_zone))
        return server.availability_zone or None

    def _create_volume(self, disk_spec):
        """
        Create the volume and wait until it is available.
        :param DiskSpec disk_spec:
        :return: The volume ID
        """
        volume = self._client.create_volume(disk_spec.to_params())
        LOG.info(messages.DRIVER_OPERATION_VOL_CREATED.format(
            volume_id=volume.id, state=VOLUME_STATE_AVAILABLE))
        self._wait_resource(volume, VOLUME_STATE_AVAILABLE)
        return str(volume.id)

    @logme(LOG, PREFIX)
    def create_disk(self, size_mib, cloud_properties, server_id=None):
        """
        Create a detachable data disk, in the availability zone of
        ``server_id`` unless ``ignore_server_availability_zone`` is set.

        :param int size_mib: The size of the disk in MiB.
        :param dict cloud_properties: May hold the volume ``type``.
        :param server_id: The server the disk is created for.
        :raises CloudError: If the size is out of [1 GiB, 1 TiB].
        :returns: The ID of the new volume.
        """
        size = disk_size_in_gib(size_mib)
        disk_spec = DiskSpec(
            name=self._volume_name(),
            description=u'',
            size=size,
            volume_type=get_volume_type(cloud_properties),
            availability_zone=self._server_availability_zone(server_id),
        )
        LOG.info(messages.DRIVER_OPERATION_VOL_CREATING.format(
            name=disk_spec.name,
            size=disk_spec.size,
            volume_type=disk_spec.volume_type,
            zone=disk_spec.availability_zone,
        ))
        return self._create_volume(disk_spec)

    @logme(LOG, PREFIX)
    def create_boot_disk(self, size_mib, image_id, availability_zone=None,
                         cloud_properties=None):
        """
        Create a disk from ``image_id`` to boot a server from.

        :param int size_mib: The size of the disk in MiB.
        :param image_id: The image to create the disk from.
        :param availability_zone: Used as given, if not ``None``.
        :param dict cloud_properties: May hold the volume ``type``.
        :raises CloudError: If the size is out of [1 GiB, 1 TiB].
        :returns: The ID of the new volume.
        """
        size = disk_size_in_gib(size_mib)
        disk_spec = DiskSpec(
            name=self._volume_name(),
            size=size,
            volume_type=get_volume_type(cloud_properties),
            image_ref=image_id,
            availability_zone=availability_zone,
        )
        LOG.info(messages.DRIVER_OPERATION_BOOT_VOL_CREATING.format(
            name=disk_spec.name,
            size=disk_spec.size,
            image=disk_spec.image_ref,
            volume_type=disk_spec.volume_type,
            zone=disk_spec.availability_zone,
        ))
        return self._create_volume(disk_spec)
