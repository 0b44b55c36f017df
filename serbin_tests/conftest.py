import logging
import os

import structlog

from serbin.conf import UNITTESTS_SETTINGS_FILEPATH

os.environ['SERBIN_CONFIG_YAML'] = os.environ.get('SERBIN_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)

# debug logs are printed to stdout by default, which would get mixed with doctest outputs
structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.INFO))
