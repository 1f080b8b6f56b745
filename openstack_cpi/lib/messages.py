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

OPENSTACK_STRING = 'OpenStack'
KEYSTONE_STRING = 'Keystone'

MIN_DISK_SIZE_ERROR = 'Minimum disk size is 1 GiB'
MAX_DISK_SIZE_ERROR = 'Maximum disk size is 1 TiB'
DISK_SIZE_NOT_INTEGER = 'Disk size needs to be an integer'

WRONG_VALUE_FOR_YML_PARAMETER = \
    'Illegal value for parameter [{}], expected value is [{}].'

MISSING_YML_PARAMETER = \
    'Missing mandatory parameter [{}] in the {} configuration.'

ENV_NAME_YML_FILE = 'OPENSTACK_CPI_CONFIG_FILE'
MISSING_ENV_FILE_FOR_TESTING = \
    'Missing mandatory environment named {} with the path to the ' \
    'test configuration file'.\
    format(ENV_NAME_YML_FILE)

PACKAGE_FORMAL_DESCRIPTION = \
    "OpenStack Cloud Provider Interface disk provisioning"

PACKAGE_FORMAL_KEYWORDS = [
    "cpi", "plugin", "openstack", "cinder", "volume",
]

MESSAGE_TYPE_ELIOT_LOG = "openstack_cpi:cloud"

EXCEPTION_NO_CLIENT_TYPE_EXIST = \
    "No Python module {module} exists for client type {ctype}."

DRIVER_INITIALIZATION = \
    PACKAGE_FORMAL_DESCRIPTION + ' is up and running.' \
    ' Cloud initialized with {client_type} client for {auth_url} ' \
    'and user name {username}.'

DRIVER_OPERATION_VOL_CREATING = \
    "Creating new volume name={name}, size={size}GiB, " \
    "volume_type={volume_type}, availability_zone={zone}."

DRIVER_OPERATION_BOOT_VOL_CREATING = \
    "Creating new boot volume name={name}, size={size}GiB, " \
    "image={image}, volume_type={volume_type}, availability_zone={zone}."

DRIVER_OPERATION_VOL_CREATED = \
    "Created volume {volume_id}, waiting for it to become {state}."

DRIVER_OPERATION_SERVER_AZ = \
    "Server {server_id} is in availability zone {zone}."

DRIVER_OPERATION_SERVER_AZ_IGNORED = \
    "Ignoring availability zone of server {server_id}."

DRIVER_OPERATION_SERVER_NOT_FOUND = \
    "Server {server_id} was not found, no availability zone is applied."

WAIT_RESOURCE_TIMEOUT = \
    "Timed out waiting for {desc} to be {target_state}"

WAIT_RESOURCE_NOT_FOUND = \
    "{desc} not found"

WAIT_RESOURCE_ERROR_STATE = \
    "{desc} state is {state}, expected {target_state}"

WAIT_RESOURCE_STATE = \
    "{desc} is {state}, waiting for {target_state} " \
    "({duration:.1f}s of {timeout}s)."

RAISED_UNAUTHORIZED_SO_RELOGIN_TO_GET_TOKEN = \
    'func [{func_name}] raised HTTP UNAUTHORIZED, ' \
    '(exception {exception}, {reason}, {content}).' \
    ' Regenerate token and rerun the same func.'

ENDPOINT_NOT_FOUND_IN_CATALOG = \
    "No {endpoint_type} endpoint for service type [{service_type}] " \
    "in region [{region}] found in the {keystone} service catalog."

INIT_CLIENT = 'Login to {backend} at {url} as {username}.'

HTTP_REQUEST_DEBUG = 'HTTP {action} request to {url} {payload}'
