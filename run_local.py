#!/usr/bin/env python
"""Script to run the notification scheduler locally."""

import os
import sys

from django.core.management import execute_from_command_line


def main():
    """Run the notification scheduler in the foreground.

    Uses the custom 'runscheduler' command, which configures structured
    logging, starts both sweep cadences and blocks until interrupted.
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "expiry_notifier.settings")
    execute_from_command_line([sys.argv[0], "runscheduler", *sys.argv[1:]])


if __name__ == "__main__":
    main()
