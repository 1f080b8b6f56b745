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

import json
import unittest
from mock import patch, MagicMock
from openstack_cpi.lib.openstack_rest_client import (
    OpenStackRESTClientAPI,
    RestClient,
    RestClientException,
    EndpointNotFound,
)
from openstack_cpi.lib.abstract_client import (
    ConnectionInfo,
    ServerInfo,
    VolumeInfo,
)

AUTH_URL = 'http://127.0.0.1:5000/v2.0'
VOLUME_URL = 'http://127.0.0.1:8776/v1/tenant-id'
COMPUTE_URL = 'http://127.0.0.1:8774/v2/tenant-id'

FAKE_ACCESS = {
    'token': {'id': 'FAKE TOKEN'},
    'serviceCatalog': [
        {
            'type': 'compute',
            'name': 'nova',
            'endpoints': [
                {'region': 'RegionTwo',
                 'publicURL': 'http://other:8774/v2/tenant-id'},
                {'region': 'RegionOne', 'publicURL': COMPUTE_URL + '/',
                 'internalURL': 'http://internal:8774/v2/tenant-id'},
            ],
        },
        {
            'type': 'volume',
            'name': 'cinder',
            'endpoints': [
                {'region': 'RegionOne', 'publicURL': VOLUME_URL},
            ],
        },
    ],
}

FAKE_VOL_CONTENT = json.dumps({'volume': {
    'id': 'v-foobar',
    'display_name': 'volume-a0a6f66d',
    'display_description': '',
    'size': 2,
    'status': 'creating',
    'availability_zone': 'nova',
    'volume_type': None,
}})

FAKE_SERVER_CONTENT = json.dumps({'server': {
    'id': 'i-test',
    'name': 'vm-1',
    'status': 'ACTIVE',
    'OS-EXT-AZ:availability_zone': 'foobar-land',
}})

_RESTCLIENT_PATH = 'openstack_cpi.lib.openstack_rest_client.RestClient'
GET_TOKEN_FUNC = _RESTCLIENT_PATH + '._get_token'
REQUESTS = 'openstack_cpi.lib.openstack_rest_client.requests'

TOKEN_EXPIRED_STR = 'Token has expired'


def _con_info(region=None):
    return ConnectionInfo(AUTH_URL, 'admin', 'secret', 'demo',
                          region=region, endpoint_type='publicURL',
                          verify_ssl=False)


class FakeRespond(object):

    def __init__(self, content, status_code):
        self.content = content
        self.status_code = status_code

    def json(self):
        return json.loads(self.content)


class TestsRESTClient(unittest.TestCase):
    """
    Unit testing for RestClient class
    """

    @patch(GET_TOKEN_FUNC)
    def test_client_init(self, get_token_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        self.assertEqual(r.session.headers['X-Auth-Token'], 'FAKE TOKEN')
        self.assertEqual(r.session.headers['Content-Type'], 'application/json')
        self.assertFalse(r.session.verify)
        self.assertEqual(r.service_catalog, FAKE_ACCESS['serviceCatalog'])
        get_token_mock.assert_called_once_with(
            AUTH_URL + '/tokens',
            dict(auth=dict(
                passwordCredentials=dict(username='admin', password='secret'),
                tenantName='demo',
            )))

    @patch(REQUESTS)
    def test_client_get_token(self, requests_mock):
        session = requests_mock.Session.return_value
        session.headers = {}
        session.post.return_value = FakeRespond(
            json.dumps({'access': FAKE_ACCESS}), 200)

        r = RestClient(_con_info(), AUTH_URL)

        self.assertEqual(r.session.headers['X-Auth-Token'], 'FAKE TOKEN')
        url, = session.post.call_args[0]
        self.assertEqual(url, AUTH_URL + '/tokens')
        payload = json.loads(session.post.call_args[1]['data'])
        self.assertEqual(payload['auth']['tenantName'], 'demo')

    @patch(REQUESTS)
    def test_client_get_token_unauthorized(self, requests_mock):
        session = requests_mock.Session.return_value
        session.headers = {}
        session.post.return_value = FakeRespond('bad credentials', 401)
        self.assertRaises(RestClientException, RestClient,
                          _con_info(), AUTH_URL)

    @patch(GET_TOKEN_FUNC)
    def test_client_url_for(self, get_token_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        self.assertEqual(r.url_for('volume'), VOLUME_URL)
        self.assertEqual(r.url_for('compute'),
                         'http://other:8774/v2/tenant-id')

        r = RestClient(_con_info(region='RegionOne'), AUTH_URL)
        self.assertEqual(r.url_for('compute'), COMPUTE_URL)

        r.con_info.endpoint_type = 'internalURL'
        self.assertEqual(r.url_for('compute'),
                         'http://internal:8774/v2/tenant-id')
        self.assertRaises(EndpointNotFound, r.url_for, 'volume')
        self.assertRaises(EndpointNotFound, r.url_for, 'image')

    @patch(REQUESTS)
    @patch(GET_TOKEN_FUNC)
    def test_client__generic_action(self, get_token_mock, requests_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        r._generic_action(action='get', url='/url', payload=None)
        r.session.get.assert_called_once_with('/url', data='null')
        self.assertRaises(RestClientException,
                          r._generic_action,
                          action='get',
                          url='/url',
                          payload=None,
                          exit_status=666)

    @patch(REQUESTS)
    @patch(GET_TOKEN_FUNC)
    def test_client__get(self, get_token_mock, requests_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        r.session.get = MagicMock(
            return_value=FakeRespond(FAKE_VOL_CONTENT, 200))
        # Should pass without exception
        respond = r.get(url='/url', payload=None)
        # trigger with right get params
        r.session.get.assert_called_once_with('/url', params=None)
        # check json.loads
        self.assertEqual(respond['volume']['id'], 'v-foobar')

    @patch(REQUESTS)
    @patch(GET_TOKEN_FUNC)
    def test_client__get_bad_status_code(self, get_token_mock, requests_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        r.session.get = MagicMock(
            return_value=FakeRespond(FAKE_VOL_CONTENT, 201))
        with self.assertRaises(RestClientException) as cm:
            r.get(url='/url', payload=None)
        response = cm.exception.args[0]
        self.assertEqual(response.content, FAKE_VOL_CONTENT)
        self.assertEqual(response.status_code, 201)

    @patch(REQUESTS)
    @patch(GET_TOKEN_FUNC)
    def test_client__post_accepts_multiple_status(
            self, get_token_mock, requests_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        r.session.post = MagicMock(
            return_value=FakeRespond(FAKE_VOL_CONTENT, 202))
        respond = r.post('/url', dict(volume={}), exit_status=(200, 202))
        self.assertEqual(respond['volume']['status'], 'creating')
        r.session.post.assert_called_once_with(
            '/url', data=json.dumps(dict(volume={})))


class TestsRESTClientTokenExpire(unittest.TestCase):
    """
    Unit testing for RestClient class (Token Expiration)
    """

    @patch(REQUESTS)
    @patch(GET_TOKEN_FUNC)
    def test_token_expire__get(self, get_token_mock, requests_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        r.session.get = MagicMock()
        r.session.get.side_effect = [
            FakeRespond(TOKEN_EXPIRED_STR,
                        RestClient.HTTP_EXIT_STATUS['UNAUTHORIZED']),
            FakeRespond(FAKE_VOL_CONTENT,
                        RestClient.HTTP_EXIT_STATUS['SUCCESS']),
        ]
        r.get(url='/url', payload=None)
        self.assertEqual(get_token_mock.call_count, 2)

    @patch(REQUESTS)
    @patch(GET_TOKEN_FUNC)
    def test_token_expire__get_second_also_fail(
            self, get_token_mock, requests_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        r.session.get = MagicMock()
        r.session.get.side_effect = [
            FakeRespond(TOKEN_EXPIRED_STR,
                        RestClient.HTTP_EXIT_STATUS['UNAUTHORIZED']),
            FakeRespond('fake, second time gets fail error', 666),
        ]
        self.assertRaises(
            RestClientException, r.get, url='/url', payload=None
        )

    @patch(REQUESTS)
    @patch(GET_TOKEN_FUNC)
    def test_token_expire__post(self, get_token_mock, requests_mock):
        get_token_mock.return_value = FAKE_ACCESS
        r = RestClient(_con_info(), AUTH_URL)
        r.session.post = MagicMock()
        r.session.post.side_effect = [
            FakeRespond(TOKEN_EXPIRED_STR,
                        RestClient.HTTP_EXIT_STATUS['UNAUTHORIZED']),
            FakeRespond(FAKE_VOL_CONTENT,
                        RestClient.HTTP_EXIT_STATUS['ACCEPTED']),
        ]
        r.post('/url', payload=None, exit_status=202)


class TestsOpenStackRESTClientAPI(unittest.TestCase):
    """
    Unit testing for OpenStackRESTClientAPI class
    """

    def setUp(self):
        patcher = patch(_RESTCLIENT_PATH)
        self.rest_client_class = patcher.start()
        self.addCleanup(patcher.stop)
        self.rest_client = self.rest_client_class.return_value
        self.rest_client.url_for.side_effect = \
            lambda service_type: dict(volume=VOLUME_URL,
                                      compute=COMPUTE_URL)[service_type]
        self.con_info = ConnectionInfo(AUTH_URL + '/', 'admin', 'secret',
                                       'demo', debug_level='DEBUG')
        self.client = OpenStackRESTClientAPI(self.con_info)

    def test_client_init(self):
        self.rest_client_class.assert_called_once_with(self.con_info,
                                                       AUTH_URL)
        self.assertEqual(self.client.con_info.endpoint_type, 'publicURL')
        self.assertEqual(self.client._volume_url, VOLUME_URL)
        self.assertEqual(self.client._compute_url, COMPUTE_URL)

    def test_create_volume(self):
        self.rest_client.post.return_value = json.loads(FAKE_VOL_CONTENT)
        params = dict(display_name='volume-a0a6f66d',
                      display_description='', size=2)

        volume = self.client.create_volume(params)

        self.rest_client.post.assert_called_once_with(
            VOLUME_URL + '/volumes', dict(volume=params),
            exit_status=(200, 202))
        self.assertEqual(volume, VolumeInfo(
            'v-foobar', 'volume-a0a6f66d', 2, 'creating', 'nova'))

    def test_get_volume(self):
        content = json.loads(FAKE_VOL_CONTENT)
        content['volume']['status'] = 'available'
        self.rest_client.get.return_value = content

        volume = self.client.get_volume('v-foobar')

        self.rest_client.get.assert_called_once_with(
            VOLUME_URL + '/volumes/v-foobar')
        self.assertEqual(volume.status, 'available')

    def test_get_volume_not_found(self):
        self.rest_client.get.side_effect = RestClientException(
            FakeRespond('not found', 404), 'not found')
        self.assertIsNone(self.client.get_volume('v-foobar'))

    def test_get_volume_other_error(self):
        self.rest_client.get.side_effect = RestClientException(
            FakeRespond('boom', 500), 'boom')
        self.assertRaises(RestClientException,
                          self.client.get_volume, 'v-foobar')

    def test_get_server(self):
        self.rest_client.get.return_value = json.loads(FAKE_SERVER_CONTENT)

        server = self.client.get_server('i-test')

        self.rest_client.get.assert_called_once_with(
            COMPUTE_URL + '/servers/i-test')
        self.assertEqual(server, ServerInfo(
            'i-test', 'vm-1', 'ACTIVE', 'foobar-land'))

    def test_get_server_not_found(self):
        self.rest_client.get.side_effect = RestClientException(
            FakeRespond('not found', 404), 'not found')
        self.assertIsNone(self.client.get_server('i-test'))
