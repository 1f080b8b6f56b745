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

from openstack_cpi.lib.constants import MANDATORY_CONFIGURATIONS_IN_YML_FILE


def cloud_factory(**kwargs):
    # openstack_cpi must import without its dependencies (setup.py)
    from openstack_cpi.openstack_cloud import get_openstack_cloud_by_conf
    return get_openstack_cloud_by_conf(kwargs)


REQUIRED_CONFIG = MANDATORY_CONFIGURATIONS_IN_YML_FILE
