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

import time
import logging
from uuid import uuid4
from functools import wraps
from eliot import log_message
from openstack_cpi.lib import messages
from openstack_cpi.lib.constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_STATE_TIMEOUT,
    RESOURCE_ERROR_STATES,
)
from openstack_cpi.lib.exceptions import CloudError


def logme(logger, prefix=None, level=logging.DEBUG):
    """
    Decorator for logging functions with args/kwargs and return value
    :param logger: Log to use
    :param prefix: Prefix if any
    :param level: Log level
    :return: func
    """
    def decorate(func):
        func_name = func.__name__
        func_module = func.__module__

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            _prefix = '(' + prefix + ') ' if prefix else ''
            logger.log(level, '{}.[{}]: {}Begin:{}{}'.format(
                func_module,
                func_name,
                _prefix,
                ' {}'.format('args {}'.format(args)) if args else '',
                ' {}'.format('kwargs {}'.format(kwargs)) if kwargs else ''))
            res = func(self, *args, **kwargs)
            return_str = ' {}'.format(
                'returned {}'.format(res) if res is not None else '')
            logger.log(level, '{}.[{}]:--> {}End:{}'.format(
                func_module,
                func_name,
                _prefix,
                return_str,
            ))
            return res
        return wrapper
    return decorate


class OpenStackCPILogHandler(logging.Handler):
    """ log handler for Eliot logging."""

    def emit(self, record):
        """
        Write log message to the Eliot stream.
        :param record:
        :return:
        """
        msg = self.format(record)
        log_message(
            message_type=messages.MESSAGE_TYPE_ELIOT_LOG,
            message_level=record.levelname,
            message=msg)


def config_logger(log):
    """
    Set the write log level, add Eliot handler and prevent propagate multiple
    :param log:
    :return log:
    """
    log.setLevel(logging.DEBUG)
    log.addHandler(OpenStackCPILogHandler())
    log.propagate = False
    return log


LOG = config_logger(logging.getLogger(__name__))


def generate_unique_name():
    """
    :return: a new random UUID string, used as the suffix of resource names
    """
    return str(uuid4())


def _resource_description(resource):
    """
    e.g : volume `d6b0d5a2-...'
    """
    resource_type = getattr(resource, 'resource_type', None) or \
        type(resource).__name__.lower()
    return "{} `{}'".format(resource_type, resource.id)


def wait_resource(resource, target_state, refresh,
                  timeout=DEFAULT_STATE_TIMEOUT,
                  poll_interval=DEFAULT_POLL_INTERVAL,
                  sleep=time.sleep, clock=time.monotonic):
    """
    Block until the status of a remote resource reaches the target state.

    The given resource is checked first, then it is refreshed every
    ``poll_interval`` seconds.
    The state of each refreshed resource is checked before the timeout, so
    a resource that reached the target state on the last poll is returned.

    :param resource: object with ``id`` and ``status`` attributes
    :param target_state: a state name or an iterable of state names
    :param refresh: callable(resource_id) returning the current resource,
                    or None if it no longer exists
    :param timeout: seconds to wait before giving up
    :param poll_interval: seconds to sleep between two refreshes
    :raises CloudError: on timeout, on an error state or if the resource
                        disappeared
    :return: the last refreshed resource
    """
    if isinstance(target_state, str):
        target_state = [target_state]
    target_states = [state.lower() for state in target_state]
    target_desc = ', '.join(target_states)
    desc = _resource_description(resource)
    started_at = clock()

    while True:
        state = (resource.status or '').lower()
        if state in RESOURCE_ERROR_STATES:
            raise CloudError(messages.WAIT_RESOURCE_ERROR_STATE.format(
                desc=desc, state=state, target_state=target_desc))
        if state in target_states:
            return resource

        duration = clock() - started_at
        if duration > timeout:
            raise CloudError(messages.WAIT_RESOURCE_TIMEOUT.format(
                desc=desc, target_state=target_desc))

        LOG.debug(messages.WAIT_RESOURCE_STATE.format(
            desc=desc, state=state, target_state=target_desc,
            duration=duration, timeout=timeout))
        sleep(poll_interval)

        resource = refresh(resource.id)
        if resource is None:
            raise CloudError(messages.WAIT_RESOURCE_NOT_FOUND.format(
                desc=desc))
