import sys

from txnguard.cli import main

sys.exit(main())
