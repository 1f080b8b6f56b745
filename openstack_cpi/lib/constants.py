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

# Constants related to volume names
VOLUME_NAME_PREFIX = 'volume-'
VOLUME_TYPE_PROPERTY = 'type'

# Constants related to volume states
VOLUME_STATE_AVAILABLE = 'available'
RESOURCE_ERROR_STATES = frozenset(['error', 'failed', 'killed'])

# Constants related to YML file parameters and defaults
DEFAULT_DEBUG_LEVEL = 'INFO'  # aka default log_level
DEFAULT_VERIFY_SSL = True
DEFAULT_CLIENT_TYPE = 'rest'
DEFAULT_ENDPOINT_TYPE = 'publicURL'
DEFAULT_IGNORE_SERVER_AZ = False
DEFAULT_STATE_TIMEOUT = 300  # seconds
DEFAULT_POLL_INTERVAL = 5  # seconds
CONF_SECTION_OPENSTACK = u"openstack"
CONF_PARAM_AUTH_URL = u"auth_url"
CONF_PARAM_USERNAME = u"username"
CONF_PARAM_API_KEY = u"api_key"
CONF_PARAM_TENANT = u"tenant"
MANDATORY_CONFIGURATIONS_IN_YML_FILE = {
    CONF_PARAM_AUTH_URL,
    CONF_PARAM_USERNAME,
    CONF_PARAM_API_KEY,
    CONF_PARAM_TENANT,
}
CONF_PARAM_REGION = u"region"
CONF_PARAM_ENDPOINT_TYPE = u"endpoint_type"
CONF_PARAM_DEBUG = u"log_level"
CONF_PARAM_CLIENT_TYPE = u"client_type"
CONF_PARAM_VERIFY_SSL = u"verify_ssl_certificate"
CONF_PARAM_IGNORE_SERVER_AZ = u"ignore_server_availability_zone"
CONF_PARAM_STATE_TIMEOUT = u"state_timeout"
CONF_PARAM_POLL_INTERVAL = u"wait_resource_poll_interval"
CONF_PARAM_DEBUG_OPTIONS = ["DEBUG", "INFO", "WARN", "ERROR"]
