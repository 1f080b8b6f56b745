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

import os
import logging
from unittest import SkipTest
from openstack_cpi.openstack_cloud import get_openstack_cloud_by_conf_file
from openstack_cpi.lib import messages
from openstack_cpi.lib.utils import config_logger

LOG = config_logger(logging.getLogger(__name__))


def get_openstack_cloud_from_environment():
    """
    :returns: An instance of OpenStackCloud
    """
    config_file_path = os.environ.get(messages.ENV_NAME_YML_FILE)
    if config_file_path is None:
        raise SkipTest(messages.MISSING_ENV_FILE_FOR_TESTING)

    return get_openstack_cloud_by_conf_file(config_file_path)


def delete_volume(cloud, volume_id):
    """
    Delete a volume created by a test.
    :param cloud: OpenStackCloud
    :param volume_id:
    """
    # pylint: disable=W0212
    rest_client = cloud._client._client
    url = '{}/volumes/{}'.format(cloud._client._volume_url, volume_id)
    LOG.debug('delete_volume : deleting test volume {}'.format(volume_id))
    rest_client.session.delete(url)


def get_openstack_cloud_for_test(test_case):
    """
    Create a ``OpenStackCloud`` instance for the tests and register a
    cleanup of every volume the test creates.
    :param test_case: Test case object
    :returns: A ``OpenStackCloud`` instance
    """
    cloud = get_openstack_cloud_from_environment()

    original_create_volume = cloud._client.create_volume

    def create_volume_with_cleanup(params):
        volume = original_create_volume(params)
        test_case.addCleanup(delete_volume, cloud, volume.id)
        return volume

    # pylint: disable=W0212
    cloud._client.create_volume = create_volume_with_cleanup
    return cloud
