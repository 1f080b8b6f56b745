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

import abc
import importlib
import importlib.util
from openstack_cpi.lib import messages


class ExceptionOpenStackClient(Exception):
    pass


class ConnectionInfo(object):

    def __init__(self, auth_url, username, api_key, tenant, region=None,
                 endpoint_type=None, verify_ssl=None, debug_level=None):
        """
        This object holds connection information about the OpenStack cloud.
        :param auth_url: Keystone URL
        :param username:
        :param api_key: The password of the user
        :param tenant: The tenant (project) name
        :param region: If None, the first endpoint of the catalog is used
        :param endpoint_type: publicURL, internalURL or adminURL
        :param verify_ssl:
        """
        self.auth_url = auth_url
        self.tenant = tenant
        self.region = region
        self.endpoint_type = endpoint_type
        self.verify_ssl = verify_ssl
        self.debug_level = debug_level
        self.credential = dict(
            username=username,
            password=api_key,
        )

    def __eq__(self, other):
        return self.__dict__ == other.__dict__


class VolumeInfo(object):
    resource_type = 'volume'

    def __init__(self, vol_id, name, size, status, availability_zone=None):
        """
        Holds the minimal information that the CPI needs to know about
        a volume
        :param vol_id: Volume ID
        :param name: Volume display name
        :param size: Volume size in GiB
        :param status: e.g creating, available, error
        :param availability_zone:
        """
        self.id = vol_id
        self.name = name
        self.size = size
        self.status = status
        self.availability_zone = availability_zone

    def __eq__(self, other):
        return self.__dict__ == other.__dict__

    def __repr__(self):
        return 'VolumeInfo({!r})'.format(self.__dict__)


class ServerInfo(object):
    resource_type = 'server'

    def __init__(self, server_id, name, status=None, availability_zone=None):
        """
        :param server_id: Server ID
        :param name: Server name
        :param status: e.g ACTIVE, BUILD
        :param availability_zone: None if the cloud does not expose it
        """
        self.id = server_id
        self.name = name
        self.status = status
        self.availability_zone = availability_zone

    def __eq__(self, other):
        return self.__dict__ == other.__dict__

    def __repr__(self):
        return 'ServerInfo({!r})'.format(self.__dict__)


class OpenStackAbsClient(object, metaclass=abc.ABCMeta):

    @abc.abstractmethod
    def __init__(self, con_info):
        """
        :param con_info: ConnectionInfo
        """
        raise NotImplementedError

    @abc.abstractmethod
    def create_volume(self, params):
        """
        :param params: dict of volume attributes, e.g display_name, size
        :return: VolumeInfo of the new volume
        """
        raise NotImplementedError

    @abc.abstractmethod
    def get_volume(self, volume_id):
        """
        :param volume_id:
        :return: VolumeInfo, or None if the volume does not exist
        """
        raise NotImplementedError

    @abc.abstractmethod
    def get_server(self, server_id):
        """
        :param server_id:
        :return: ServerInfo, or None if the server does not exist
        """
        raise NotImplementedError


class FactoryBackendAPIClient(object):
    """
    Create the backend API client by given client type.
    It's plugable to new client types like an SDK based client.
    Currently, we support only the plain REST client.

    Instructions on how to add a new client plug-in:
    Add a module with file convention lib.openstack_<NEW>_client.py,
    This new module should implement lib.abstract_client.OpenStackAbsClient.
    The name of the class should be OpenStack<NEW>ClientAPI.
    """
    @staticmethod
    def get_module_dynamic(client_type):
        """
        :param client_type: String
        :return: module lib.openstack_<client_type>_client
        :raise: OpenStackDriverNoClientModuleFound if module not found
        """
        module_name = 'openstack_cpi.lib.openstack_{}_client'.format(
            str(client_type).lower())
        if importlib.util.find_spec(module_name) is None:
            raise OpenStackDriverNoClientModuleFound(module_name, client_type)

        return importlib.import_module(module_name)

    @staticmethod
    def get_class_dynamic(module_object, client_type):
        """
        :param module_object: module lib.openstack_<client_type>_client
        :param client_type: string
        :return: OpenStack<client_type>ClientAPI class from the given module
        :raise: AttributeError if class does not exist in given module
        """
        class_name = 'OpenStack{}ClientAPI'.format(str(client_type).upper())
        class_object = getattr(module_object, class_name)
        return class_object

    @classmethod
    def factory(cls, connection_info, client_type):
        """
        Create backend client object
        :param connection_info: ConnectionInfo
        :param client_type: String
        :return: OpenStack<client_type>ClientAPI object
        """
        class_object = cls.get_class_dynamic(
            cls.get_module_dynamic(client_type), client_type)
        return class_object(connection_info)


class OpenStackDriverNoClientModuleFound(Exception):

    def __init__(self, module_path, ctype):
        Exception.__init__(
            self,
            messages.EXCEPTION_NO_CLIENT_TYPE_EXIST.format(
                module=module_path,
                ctype=ctype),
        )
