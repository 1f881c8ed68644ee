import sys

from trigger_proxy.cli import main

sys.exit(main())
