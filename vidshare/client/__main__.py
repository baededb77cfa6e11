import sys

from vidshare.client.cli import main

sys.exit(main())
