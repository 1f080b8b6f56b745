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

import requests
import json
from functools import wraps
from openstack_cpi.lib import messages
from openstack_cpi.lib.abstract_client import (
    OpenStackAbsClient, VolumeInfo, ServerInfo, ExceptionOpenStackClient,
)
from openstack_cpi.lib.constants import DEFAULT_ENDPOINT_TYPE
import logging
from openstack_cpi.lib.utils import logme, config_logger

LOG = config_logger(logging.getLogger(__name__))

URL_KEYSTONE_RESOURCE_TOKENS = '/tokens'
URL_CINDER_RESOURCE_VOLUME = '/volumes'
URL_NOVA_RESOURCE_SERVER = '/servers'
SERVICE_TYPE_VOLUME = 'volume'
SERVICE_TYPE_COMPUTE = 'compute'
NOVA_AVAILABILITY_ZONE_ATTR = 'OS-EXT-AZ:availability_zone'
HTTP_EXIT_STATUS = dict(
    SUCCESS=200,
    CREATED=201,
    ACCEPTED=202,
    DELETED=204,
    UNAUTHORIZED=401,
    NOT_FOUND=404,
)


class RestClientException(Exception):
    """
    Use for every REST API response with unexpected exit status
    """


class EndpointNotFound(ExceptionOpenStackClient):

    def __init__(self, service_type, endpoint_type, region):
        Exception.__init__(
            self,
            messages.ENDPOINT_NOT_FOUND_IN_CATALOG.format(
                service_type=service_type,
                endpoint_type=endpoint_type,
                region=region,
                keystone=messages.KEYSTONE_STRING),
        )
        self.service_type = service_type


class RestClient(object):
    """
        Wrapper for http requests to provide easy REST API operations
        against Keystone authenticated OpenStack services.
    """
    HTTP_EXIT_STATUS = HTTP_EXIT_STATUS
    AUTH_KEY = 'X-Auth-Token'

    def __init__(self, connection_info, auth_url):
        """
        :param connection_info: ConnectionInfo
        :param auth_url: Keystone URL for initial authentication
        """
        self.auth_url = auth_url
        self.con_info = connection_info
        self.service_catalog = []
        self.session = requests.Session()
        self.session.verify = connection_info.verify_ssl

        # Basic headers
        self.session.headers.update({'Content-Type': 'application/json',
                                     'Accept': 'application/json'})

        self.get_token_and_update_header()

    def _retry_if_token_expire(func):
        @wraps(func)
        def wrapped(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except RestClientException as e:
                response = e.args[0]
                if response.status_code == \
                        self.HTTP_EXIT_STATUS['UNAUTHORIZED']:

                    LOG.debug(
                        messages.RAISED_UNAUTHORIZED_SO_RELOGIN_TO_GET_TOKEN.
                        format(func_name=func.__name__,
                               exception=e,
                               reason=getattr(response, 'reason', ''),
                               content=getattr(response, 'content', '')))

                    # Get new token
                    self.get_token_and_update_header()

                    # Run again the same REST API
                    return func(self, *args, **kwargs)
                else:
                    raise

        return wrapped

    def _generic_action(self, action, url, payload=None, exit_status=None):
        """
        Trigger request action on given URL and payload, and verify the
        respond exit_status.
        :param action:
        :param url:
        :param payload:
        :param exit_status:
        :return: the request response
        """
        payload_json = json.dumps(payload)
        LOG.debug(messages.HTTP_REQUEST_DEBUG.format(
            action=action, url=url, payload=payload))
        response = getattr(self.session, action)(url, data=payload_json)
        self.verify_status_code(response, exit_status, action)
        return response

    def _auth_payload(self):
        return dict(auth=dict(
            passwordCredentials=self.con_info.credential,
            tenantName=self.con_info.tenant,
        ))

    def get_token_and_update_header(self):
        # remove the token from header if exist
        self.session.headers.pop(self.AUTH_KEY, None)

        access = self._get_token(
            self.auth_url + URL_KEYSTONE_RESOURCE_TOKENS,
            self._auth_payload())

        # update token in header
        self.session.headers.update({self.AUTH_KEY: access['token']['id']})
        self.service_catalog = access.get('serviceCatalog', [])

    def _get_token(self, url, payload,
                   exit_status=HTTP_EXIT_STATUS['SUCCESS']):
        response = self._generic_action('post', url, payload, exit_status)
        return response.json()['access']

    def url_for(self, service_type):
        """
        Find a service endpoint in the Keystone service catalog.
        :param service_type: e.g volume, compute
        :raise EndpointNotFound: if no endpoint matches the region and the
                                 endpoint type of the connection
        :return: URL without trailing slash
        """
        region = self.con_info.region
        endpoint_type = self.con_info.endpoint_type
        for service in self.service_catalog:
            if service.get('type') != service_type:
                continue
            for endpoint in service.get('endpoints', []):
                if region and endpoint.get('region') != region:
                    continue
                url = endpoint.get(endpoint_type)
                if url:
                    return url.rstrip('/')
        raise EndpointNotFound(service_type, endpoint_type, region)

    @_retry_if_token_expire
    def post(self, url, payload=None,
             exit_status=HTTP_EXIT_STATUS['CREATED']):
        """
        :return: post response passed to json
        """
        response = self._generic_action('post', url, payload, exit_status)
        return json.loads(response.content)

    @_retry_if_token_expire
    def get(self, url, payload=None,
            exit_status=HTTP_EXIT_STATUS['SUCCESS']):
        """
        Send get request with params=payload
        :param url:
        :param payload: parameters for the get request
        :param exit_status:
        :return: get response passed to json
        """
        LOG.debug(messages.HTTP_REQUEST_DEBUG.format(
            action='get', url=url, payload=payload))
        response = self.session.get(url, params=payload)
        self.verify_status_code(response, exit_status, 'get')
        return json.loads(response.content)

    @staticmethod
    def verify_status_code(response, status_code, action):
        """
        Verify if response exit code is as expected.
        :param response:
        :param status_code: int or a tuple of accepted ints
        :param action:
        :raise RestClientException: When exit code is not as expected
        :return: None
        """
        if status_code is None:
            return None
        if isinstance(status_code, int):
            status_code = (status_code,)
        if response.status_code not in status_code:
            reason = getattr(response, 'reason', '')
            content = getattr(response, 'content', '')
            raise RestClientException(
                response,
                "{} : Expect exist_code: {}, got: {}. "
                "reason : {}. content : {}".format(
                    action, status_code, response.status_code, reason, content)
            )


class OpenStackRESTClientAPI(OpenStackAbsClient):
    client_type = 'REST'

    def __init__(self, con_info):
        """
        OpenStack python client talking plain REST to Keystone v2,
        Cinder v1 and Nova v2.
        :param con_info: ConnectionInfo
        """
        super(OpenStackAbsClient, self).__init__()
        self.con_info = self._set_defaults_for_con_info(con_info)
        if con_info.debug_level:
            LOG.setLevel(con_info.debug_level)

        self._client = RestClient(self.con_info,
                                  self.con_info.auth_url.rstrip('/'))
        self._volume_url = self._client.url_for(SERVICE_TYPE_VOLUME)
        self._compute_url = self._client.url_for(SERVICE_TYPE_COMPUTE)
        LOG.debug(messages.INIT_CLIENT.format(
            backend=messages.OPENSTACK_STRING,
            url=self.con_info.auth_url,
            username=self.con_info.credential['username']))

    @staticmethod
    def _set_defaults_for_con_info(con_info):
        if not con_info.endpoint_type:
            con_info.endpoint_type = DEFAULT_ENDPOINT_TYPE
        return con_info

    def _get_or_none(self, url):
        """
        :return: get response passed to json, None if the resource is missing
        """
        try:
            return self._client.get(url)
        except RestClientException as e:
            response = e.args[0]
            if response.status_code == \
                    HTTP_EXIT_STATUS['NOT_FOUND']:
                return None
            raise

    @logme(LOG)
    def create_volume(self, params):
        """
        :param params: dict of Cinder volume attributes
        :return: VolumeInfo
        """
        response = self._client.post(
            self._volume_url + URL_CINDER_RESOURCE_VOLUME,
            dict(volume=params),
            exit_status=(HTTP_EXIT_STATUS['SUCCESS'],
                         HTTP_EXIT_STATUS['ACCEPTED']),
        )
        return self._get_volume_info(response['volume'])

    def get_volume(self, volume_id):
        url = '{}{}/{}'.format(
            self._volume_url, URL_CINDER_RESOURCE_VOLUME, volume_id)
        response = self._get_or_none(url)
        if response is None:
            return None
        return self._get_volume_info(response['volume'])

    @logme(LOG)
    def get_server(self, server_id):
        url = '{}{}/{}'.format(
            self._compute_url, URL_NOVA_RESOURCE_SERVER, server_id)
        response = self._get_or_none(url)
        if response is None:
            return None
        return self._get_server_info(response['server'])

    @staticmethod
    def _get_volume_info(vol_rest_respond):
        """
        Convert a volume REST response to a VolumeInfo object
        :param vol_rest_respond:
        :return: VolumeInfo
        """
        return VolumeInfo(
            vol_rest_respond['id'],
            vol_rest_respond.get('display_name') or
            vol_rest_respond.get('name'),
            vol_rest_respond.get('size'),
            vol_rest_respond.get('status'),
            vol_rest_respond.get('availability_zone'),
        )

    @staticmethod
    def _get_server_info(server_rest_respond):
        return ServerInfo(
            server_rest_respond['id'],
            server_rest_respond.get('name'),
            server_rest_respond.get('status'),
            server_rest_respond.get(NOVA_AVAILABILITY_ZONE_ATTR),
        )
