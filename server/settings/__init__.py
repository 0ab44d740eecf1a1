"""Main settings file for the project.

Settings are split into components with ``django-split-settings``.
Environment values are read once here, at startup, through
``python-decouple``; nothing else in the project reads the environment.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/drive.py',
)
