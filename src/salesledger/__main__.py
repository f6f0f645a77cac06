import sys

from salesledger.cli.main import main

sys.exit(main())
