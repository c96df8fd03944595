"""Run the WebVPN link tool: python -m webvpn"""

import sys

from webvpn.cli import main

sys.exit(main())
