import sys

from cpuload.cli import main

sys.exit(main())
